"""行级变更计算测试模块"""

from mcp_repo_editor.filesystem.change_report import compute_line_changes
from mcp_repo_editor.filesystem.models import ChangeKind, LineChange


def _as_tuples(changes):
    return [(change.kind, change.line, change.content) for change in changes]


class TestComputeLineChanges:
    """测试行级变更计算"""

    def test_identical_contents(self):
        """测试内容相同时没有变更"""
        assert compute_line_changes("a\nb\n", "a\nb\n") == []

    def test_replaced_line_deletion_before_insertion(self):
        """测试被替换的行先输出删除再输出插入"""
        changes = compute_line_changes("a\nb\nc\n", "a\nB\nc\n")
        assert _as_tuples(changes) == [
            (ChangeKind.DELETION, 2, "b"),
            (ChangeKind.INSERTION, 2, "B"),
        ]

    def test_pure_insertion_uses_new_line_numbers(self):
        """测试插入的行号对应新内容"""
        changes = compute_line_changes("a\nc\n", "a\nb\nc\n")
        assert _as_tuples(changes) == [(ChangeKind.INSERTION, 2, "b")]

    def test_pure_deletion_uses_old_line_numbers(self):
        """测试删除的行号对应旧内容"""
        changes = compute_line_changes("a\nb\nc\n", "a\nc\n")
        assert _as_tuples(changes) == [(ChangeKind.DELETION, 2, "b")]

    def test_new_file(self):
        """测试从空内容到新内容全部是插入"""
        changes = compute_line_changes("", "x\ny\n")
        assert _as_tuples(changes) == [
            (ChangeKind.INSERTION, 1, "x"),
            (ChangeKind.INSERTION, 2, "y"),
        ]

    def test_trailing_newline_only_difference(self):
        """测试仅末尾换行不同不算变更"""
        assert compute_line_changes("a\nb", "a\nb\n") == []

    def test_is_deletion_property(self):
        change = LineChange(line=1, content="x", kind=ChangeKind.DELETION)
        assert change.is_deletion
        assert not LineChange(line=1, content="x", kind=ChangeKind.INSERTION).is_deletion
