"""按行编辑算法测试模块"""

import pytest

from mcp_repo_editor.filesystem.exceptions import InvalidRangeError, MissingParameterError
from mcp_repo_editor.filesystem.line_edit import (
    apply_modification,
    join_lines,
    split_lines,
    splice_lines,
)
from mcp_repo_editor.filesystem.models import ModificationMode


class TestSplitLines:
    """测试行拆分"""

    def test_empty_text(self):
        """测试空字符串得到空序列"""
        assert split_lines("") == []

    def test_trailing_newline_dropped_once(self):
        """测试末尾换行只丢弃一个空段"""
        assert split_lines("a\nb\n") == ["a", "b"]
        assert split_lines("a\n\n") == ["a", ""]

    def test_without_trailing_newline(self):
        assert split_lines("a\nb") == ["a", "b"]

    def test_crlf_line_endings(self):
        """测试 \\r\\n 行尾被规范化"""
        assert split_lines("a\r\nb\r\n") == ["a", "b"]

    def test_join_lines_single_trailing_newline(self):
        """测试拼接后末尾恰好一个换行符"""
        assert join_lines(["a", "b"]) == "a\nb\n"
        assert join_lines([]) == "\n"


class TestApplyModification:
    """测试行编辑"""

    def test_replace_single_line(self):
        """测试替换单行"""
        result = apply_modification(
            "Line 1\nLine 2\nLine 3", ModificationMode.REPLACE, 2, 2, "Modified Line"
        )
        assert result == "Line 1\nModified Line\nLine 3\n"

    def test_insert_after_last_line(self):
        """测试在最后一行之后插入"""
        result = apply_modification(
            "Line 1\nModified Line\nLine 3\n", ModificationMode.INSERT, 4, None, "New line"
        )
        assert result == "Line 1\nModified Line\nLine 3\nNew line\n"

    def test_insert_into_empty_file(self):
        """测试向空文件插入"""
        assert apply_modification("", ModificationMode.INSERT, 1, None, "Text") == "Text\n"

    def test_insert_multiple_lines_in_middle(self):
        """测试在中间插入多行，原有行后移"""
        result = apply_modification("a\nb\n", ModificationMode.INSERT, 2, None, "x\ny")
        assert result == "a\nx\ny\nb\n"

    def test_insert_ignores_end_line(self):
        result = apply_modification("a\nb\n", ModificationMode.INSERT, 1, 2, "x")
        assert result == "x\na\nb\n"

    def test_insert_far_beyond_end_appends(self):
        """测试插入位置超出文件末尾时追加"""
        assert apply_modification("a\n", ModificationMode.INSERT, 100, None, "b") == "a\nb\n"

    def test_replace_single_line_with_multiple_lines(self):
        """测试 start_line 等于 end_line 时只删除一行并插入全部新行"""
        result = apply_modification("a\nb\nc\n", ModificationMode.REPLACE, 2, 2, "x\ny")
        assert result == "a\nx\ny\nc\n"

    def test_replace_range(self):
        """测试替换多行区间（包含 end_line）"""
        result = apply_modification("a\nb\nc\nd\n", ModificationMode.REPLACE, 2, 3, "X")
        assert result == "a\nX\nd\n"

    def test_replace_beyond_end_appends(self):
        """测试替换区间完全在文件末尾之后时追加"""
        result = apply_modification("a\nb\n", ModificationMode.REPLACE, 5, 7, "c")
        assert result == "a\nb\nc\n"

    def test_replace_partially_beyond_end(self):
        """测试替换区间越过末尾时截断到最后一行"""
        result = apply_modification("a\nb\nc\n", ModificationMode.REPLACE, 2, 10, "X")
        assert result == "a\nX\n"

    def test_replace_with_empty_content_deletes_lines(self):
        """测试用空内容替换即删除这些行"""
        result = apply_modification("a\nb\nc\n", ModificationMode.REPLACE, 2, 2, "")
        assert result == "a\nc\n"

    def test_delete_every_line(self):
        """测试删除全部行后只剩一个换行符"""
        assert apply_modification("a\nb\n", ModificationMode.REPLACE, 1, 2, "") == "\n"

    def test_reversed_range_degenerates_to_insert(self):
        """测试 end_line 小于 start_line 时退化为插入"""
        result = apply_modification("a\nb\nc\n", ModificationMode.REPLACE, 3, 1, "x")
        assert result == "a\nb\nx\nc\n"

    def test_crlf_file_is_normalized(self):
        """测试编辑后行尾统一为 \\n"""
        result = apply_modification("a\r\nb\r\n", ModificationMode.REPLACE, 1, 1, "x")
        assert result == "x\nb\n"

    def test_replace_without_end_line(self):
        """测试 replace 模式缺少 end_line"""
        with pytest.raises(MissingParameterError):
            apply_modification("a\n", ModificationMode.REPLACE, 1, None, "x")

    @pytest.mark.parametrize("start_line", [0, -1])
    def test_start_line_below_one(self, start_line):
        """测试 start_line 小于 1"""
        with pytest.raises(InvalidRangeError):
            apply_modification("a\n", ModificationMode.INSERT, start_line, None, "x")

    def test_end_line_below_one(self):
        with pytest.raises(InvalidRangeError):
            apply_modification("a\n", ModificationMode.REPLACE, 1, 0, "x")

    def test_accepts_plain_string_mode(self):
        """测试模式可以直接使用字符串值"""
        assert apply_modification("a\n", "insert", 1, None, "x") == "x\na\n"


class TestSpliceLines:
    """测试行序列拼接"""

    def test_input_not_mutated(self):
        """测试不会修改传入的行列表"""
        lines = ["a", "b", "c"]
        result = splice_lines(lines, ModificationMode.REPLACE, 1, 2, ["x"])
        assert result == ["x", "c"]
        assert lines == ["a", "b", "c"]
