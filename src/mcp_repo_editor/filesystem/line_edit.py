"""按行号编辑文本内容的核心算法"""

from typing import List, Optional

from .exceptions import InvalidRangeError, MissingParameterError
from .models import ModificationMode


def split_lines(text: str) -> List[str]:
    """
    将文本按换行符拆分为行序列

    末尾换行符产生的最后一个空段只丢弃一次，行尾的 \\r 会被去掉。
    空字符串得到空序列。

    Args:
        text: 文本内容

    Returns:
        行列表
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def join_lines(lines: List[str]) -> str:
    """将行序列拼接为文件内容，末尾恰好一个换行符"""
    return "\n".join(lines) + "\n"


def _clamp(index: int, length: int) -> int:
    return max(0, min(index, length))


def splice_lines(
    lines: List[str],
    mode: ModificationMode,
    start_line: int,
    end_line: Optional[int],
    new_lines: List[str],
) -> List[str]:
    """
    将新行拼接进行序列，返回新的行序列（不修改传入列表）

    Args:
        lines: 原始行序列
        mode: 编辑模式
        start_line: 起始行号（从 1 开始，包含）
        end_line: 结束行号（从 1 开始，包含），仅 replace 模式需要
        new_lines: 要插入的行

    Returns:
        编辑后的行序列

    Raises:
        MissingParameterError: replace 模式未提供 end_line
        InvalidRangeError: 行号小于 1
    """
    if start_line < 1:
        raise InvalidRangeError(f"start_line must be >= 1, got {start_line}")

    start = _clamp(start_line - 1, len(lines))
    if mode == ModificationMode.INSERT:
        end = start
    elif mode == ModificationMode.REPLACE:
        if end_line is None:
            raise MissingParameterError(
                "end_line must be provided when using replace mode"
            )
        if end_line < 1:
            raise InvalidRangeError(f"end_line must be >= 1, got {end_line}")
        # 空区间退化为在 start 处插入
        end = max(start, _clamp(end_line, len(lines)))
    else:
        raise TypeError(f"Unsupported modification mode: {mode!r}")

    return lines[:start] + list(new_lines) + lines[end:]


def apply_modification(
    content: str,
    mode: ModificationMode,
    start_line: int,
    end_line: Optional[int],
    new_content: str,
) -> str:
    """
    对文件内容应用一次行编辑，返回规范化后的新内容

    Args:
        content: 原文件内容
        mode: 编辑模式
        start_line: 起始行号（从 1 开始，包含）
        end_line: 结束行号（从 1 开始，包含），仅 replace 模式需要
        new_content: 新内容，可以包含多行

    Returns:
        新文件内容
    """
    lines = splice_lines(
        split_lines(content), mode, start_line, end_line, split_lines(new_content)
    )
    return join_lines(lines)
