import logging
import os
from pathlib import Path
from typing import Union

from .filesystem.exceptions import PathOutsideRepositoryError

logger = logging.getLogger(__name__)


def resolve_path_in_root(root: Path, path: Union[str, Path]) -> Path:
    """
    将相对仓库根目录的路径解析为绝对路径，并检查其不会越出根目录。

    检查规则：
    1. 路径与根目录拼接后做词法规范化（处理 ``..``），绝对路径会直接替换根目录
    2. 规范化后的路径再解析符号链接，最终位置必须位于根目录之内

    返回的是词法规范化后的路径而不是符号链接解析后的路径，
    所以删除或移动符号链接时操作的是链接本身。

    Args:
        root: 仓库根目录（绝对路径）
        path: 请求路径

    Returns:
        位于根目录内的绝对路径

    Raises:
        PathOutsideRepositoryError: 如果路径解析后位于根目录之外
    """
    candidate = Path(os.path.normpath(root / path))
    resolved = candidate.resolve()
    logger.debug("path: %s, candidate: %s, resolved: %s", path, candidate, resolved)
    if not (candidate.is_relative_to(root) and resolved.is_relative_to(root)):
        raise PathOutsideRepositoryError(f"Path is outside the repository: {path}")
    return candidate
