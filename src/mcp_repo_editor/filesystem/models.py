"""文件系统服务模型定义"""

from enum import Enum

from pydantic import BaseModel, Field


class ModificationMode(str, Enum):
    """行编辑模式"""

    INSERT = "insert"
    REPLACE = "replace"


class ChangeKind(str, Enum):
    """行变更类型，替换被视为一次删除加一次插入"""

    INSERTION = "insertion"
    DELETION = "deletion"


class LineChange(BaseModel):
    """单行变更"""

    line: int = Field(..., description="行号（从 1 开始）。删除对应旧内容，插入对应新内容")
    content: str = Field(..., description="行内容")
    kind: ChangeKind = Field(..., description="变更类型，insertion 或 deletion")

    @property
    def is_deletion(self) -> bool:
        return self.kind == ChangeKind.DELETION


class ModifyFileResult(BaseModel):
    """文件修改结果，包含修改前后的完整内容"""

    old_contents: str = Field(..., description="修改前的文件内容")
    new_contents: str = Field(..., description="修改后的文件内容")
