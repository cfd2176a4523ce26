"""核心文件系统服务类"""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional, Union

import anyio
import anyio.to_thread

from ..repository import RepositoryContext
from .exceptions import FileAlreadyExistsError, FileNotFoundInRepositoryError
from .line_edit import apply_modification
from .models import ModificationMode, ModifyFileResult

logger = logging.getLogger(__name__)

StrOrPath = Union[str, Path]


class FilesystemService:
    """提供仓库内的文件操作服务，所有路径都相对仓库根目录"""

    def __init__(self, repository: RepositoryContext, encoding: str = "utf-8"):
        """
        初始化文件系统服务

        Args:
            repository: 仓库上下文
            encoding: 文本文件编码
        """
        self._repository = repository
        self._encoding = encoding

        logger.info("初始化文件系统服务，仓库根目录: %s", repository.root)

    @property
    def repository(self) -> RepositoryContext:
        """获取仓库上下文"""
        return self._repository

    @property
    def encoding(self) -> str:
        return self._encoding

    def _resolve_path(self, path: StrOrPath) -> Path:
        """
        解析路径为仓库内的绝对路径

        Raises:
            PathOutsideRepositoryError: 路径位于仓库之外
        """
        return self._repository.resolve(path)

    async def _read_text(self, resolved_path: Path) -> str:
        async with await anyio.open_file(
            resolved_path, "r", encoding=self._encoding, newline=""
        ) as f:
            return await f.read()

    @staticmethod
    def _write_target(resolved_path: Path) -> Path:
        """写入时跟随符号链接，替换链接指向的文件而不是链接本身"""
        if resolved_path.is_symlink():
            return resolved_path.resolve()
        return resolved_path

    def _atomic_write_sync(self, resolved_path: Path, content: str) -> None:
        """先写入同目录下的临时文件，再整体替换目标文件"""
        target = self._write_target(resolved_path)
        fd, temp_path = tempfile.mkstemp(
            dir=str(target.parent),
            prefix=f".{target.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding=self._encoding, newline="") as f:
                f.write(content)
            if target.exists():
                shutil.copymode(target, temp_path)
            os.replace(temp_path, target)
        except BaseException:
            Path(temp_path).unlink(missing_ok=True)
            raise
        logger.debug("原子写入完成: %s", target)

    async def list_files(self) -> List[str]:
        """
        列出仓库中已提交、已暂存和未跟踪的文件（不含被忽略的文件）

        Returns:
            相对仓库根目录的文件路径列表
        """
        return await anyio.to_thread.run_sync(self._repository.list_files)

    async def create_file(self, path: StrOrPath, content: str) -> None:
        """
        创建新文件并写入内容，不会创建父目录

        Args:
            path: 文件路径
            content: 文件内容

        Raises:
            FileAlreadyExistsError: 文件已存在
            FileNotFoundError: 父目录不存在
        """
        resolved_path = self._resolve_path(path)
        if os.path.lexists(resolved_path):
            raise FileAlreadyExistsError(f"File already exists: {path}")
        try:
            async with await anyio.open_file(
                resolved_path, "x", encoding=self._encoding, newline=""
            ) as f:
                await f.write(content)
        except FileExistsError as e:
            raise FileAlreadyExistsError(f"File already exists: {path}") from e

    async def write_file(self, path: StrOrPath, content: str) -> Optional[str]:
        """
        写入文件内容，文件存在时覆盖，父目录不存在时自动创建

        Args:
            path: 文件路径
            content: 要写入的内容

        Returns:
            写入前的文件内容，文件原本不存在时返回 None
        """
        resolved_path = self._resolve_path(path)
        previous = await self._read_text(resolved_path) if resolved_path.exists() else None

        def _write_sync():
            self._write_target(resolved_path).parent.mkdir(parents=True, exist_ok=True)
            self._atomic_write_sync(resolved_path, content)

        await anyio.to_thread.run_sync(_write_sync)
        return previous

    async def read_file(self, path: StrOrPath) -> Optional[str]:
        """
        读取文本文件内容

        Args:
            path: 文件路径

        Returns:
            文件内容字符串，文件不存在时返回 None
        """
        resolved_path = self._resolve_path(path)
        if not resolved_path.exists():
            return None
        return await self._read_text(resolved_path)

    async def delete_file(self, path: StrOrPath) -> None:
        """
        删除文件

        Raises:
            FileNotFoundInRepositoryError: 文件不存在
        """
        resolved_path = self._resolve_path(path)
        # 悬空的符号链接也可以删除
        if not os.path.lexists(resolved_path):
            raise FileNotFoundInRepositoryError(f"File does not exist: {path}")
        await anyio.to_thread.run_sync(resolved_path.unlink)

    async def move_file(self, source: StrOrPath, destination: StrOrPath) -> None:
        """
        移动文件，目标的父目录不存在时自动创建

        Args:
            source: 源路径
            destination: 目标路径

        Raises:
            FileNotFoundInRepositoryError: 源文件不存在
            FileAlreadyExistsError: 目标文件已存在
        """
        source_path = self._resolve_path(source)
        dest_path = self._resolve_path(destination)
        if not os.path.lexists(source_path):
            raise FileNotFoundInRepositoryError(f"File does not exist: {source}")
        if os.path.lexists(dest_path):
            raise FileAlreadyExistsError(f"File already exists: {destination}")

        def _move_sync():
            # 确保目标目录存在
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            os.rename(source_path, dest_path)

        await anyio.to_thread.run_sync(_move_sync)

    async def modify_file(
        self,
        path: StrOrPath,
        mode: ModificationMode,
        start_line: int,
        end_line: Optional[int],
        content: str,
    ) -> ModifyFileResult:
        """
        按行号修改文件内容

        Args:
            path: 文件路径
            mode: insert 在 start_line 处插入；replace 替换 start_line 到 end_line（包含）的行
            start_line: 起始行号（从 1 开始）
            end_line: 结束行号（从 1 开始，包含），仅 replace 模式需要
            content: 新内容，可以包含多行

        Returns:
            修改前后的完整文件内容

        Raises:
            FileNotFoundInRepositoryError: 文件不存在
            MissingParameterError: replace 模式未提供 end_line
            InvalidRangeError: 行号小于 1
        """
        resolved_path = self._resolve_path(path)
        if not resolved_path.exists():
            raise FileNotFoundInRepositoryError(f"File does not exist: {path}")

        old_contents = await self._read_text(resolved_path)
        new_contents = apply_modification(old_contents, mode, start_line, end_line, content)
        await anyio.to_thread.run_sync(self._atomic_write_sync, resolved_path, new_contents)
        logger.debug(
            "修改文件 %s: mode=%s, start_line=%s, end_line=%s", path, mode.value, start_line, end_line
        )
        return ModifyFileResult(old_contents=old_contents, new_contents=new_contents)
