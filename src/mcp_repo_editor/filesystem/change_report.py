"""根据修改前后的内容计算行级变更"""

import difflib
from typing import List

from .line_edit import split_lines
from .models import ChangeKind, LineChange


def compute_line_changes(old_contents: str, new_contents: str) -> List[LineChange]:
    """
    计算两个版本之间的行级插入与删除

    相等的行不会输出。删除的行号对应旧内容，插入的行号对应新内容；
    被替换的行总是先输出删除再输出插入。

    Args:
        old_contents: 修改前的内容
        new_contents: 修改后的内容

    Returns:
        按顺序排列的行变更列表
    """
    old_lines = split_lines(old_contents)
    new_lines = split_lines(new_contents)
    matcher = difflib.SequenceMatcher(a=old_lines, b=new_lines, autojunk=False)

    changes: List[LineChange] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        for index in range(i1, i2):
            changes.append(
                LineChange(line=index + 1, content=old_lines[index], kind=ChangeKind.DELETION)
            )
        for index in range(j1, j2):
            changes.append(
                LineChange(line=index + 1, content=new_lines[index], kind=ChangeKind.INSERTION)
            )
    return changes
