"""MCP Repository Editor Server using FastMCP"""

import functools
import json
import logging
import os
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from ..dispatcher.dispatcher import CommandDispatcher
from ..dispatcher.models import (
    CreateFileArgs,
    CreateFileCall,
    DeleteFileArgs,
    DeleteFileCall,
    FunctionResult,
    GetAllFilesCall,
    ModifyFileArgs,
    ModifyFileCall,
    MoveFileArgs,
    MoveFileCall,
    ReadFileArgs,
    ReadFileCall,
    WriteFileArgs,
    WriteFileCall,
)
from .models import ModificationMode

logger = logging.getLogger(__name__)


def define_mcp_server(mcp: FastMCP, dispatcher: CommandDispatcher, repository_root: str):
    """
    定义MCP服务器相关配置，所有工具都通过同一个 dispatcher 顺序执行

    Args:
        mcp: MCP服务器实例
        dispatcher: 命令分发器实例
        repository_root: 仓库根目录
    """

    def _do_get_repository_info() -> Dict[str, Any]:
        """
        获取仓库服务配置信息

        Returns:
            JSON格式的配置信息
        """
        from ..version import __version__

        return {
            "server_name": "Repository Editor Server",
            "version": __version__,
            "work_dir": os.getcwd(),
            "repository_root": repository_root,
        }

    def auto_handle_exception(func):
        """
        自动处理异常，将异常转换为 error 状态的 FunctionResult

        Args:
            func: 要自动处理异常的函数

        Returns:
            包装后的函数
        """
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.error("Error executing tool %s: %s", func.__name__, e, exc_info=True)
                return FunctionResult.error(f"Error executing tool {func.__name__}: {str(e)}")
        return wrapper

    # ===== 工具 (Tools) =====

    @mcp.tool()
    @auto_handle_exception
    async def repo_get_all_files() -> FunctionResult:
        """
        列出仓库中已提交、已暂存和未跟踪的文件（不含被忽略的文件）

        Returns:
            data 为相对仓库根目录的文件路径列表
        """
        return await dispatcher.execute(GetAllFilesCall())

    @mcp.tool()
    @auto_handle_exception
    async def repo_create_file(
        path: str = Field(..., description="要创建的文件路径，相对仓库根目录"),
        content: str = Field(..., description="文件内容"),
    ) -> FunctionResult:
        """
        创建新文件，文件已存在时返回错误，不会创建父目录

        Returns:
            data 为 null
        """
        return await dispatcher.execute(
            CreateFileCall(args=CreateFileArgs(path=path, content=content))
        )

    @mcp.tool()
    @auto_handle_exception
    async def repo_write_file(
        path: str = Field(..., description="要写入的文件路径，相对仓库根目录"),
        content: str = Field(..., description="要写入的内容"),
    ) -> FunctionResult:
        """
        写入文件内容，覆盖已有文件并自动创建父目录

        Returns:
            data 为写入前的文件内容，文件原本不存在时为 null
        """
        return await dispatcher.execute(
            WriteFileCall(args=WriteFileArgs(path=path, content=content))
        )

    @mcp.tool()
    @auto_handle_exception
    async def repo_read_file(
        path: str = Field(..., description="要读取的文件路径，相对仓库根目录"),
    ) -> FunctionResult:
        """
        读取文件内容

        Returns:
            data 为文件的文本内容，文件不存在时为 null
        """
        return await dispatcher.execute(ReadFileCall(args=ReadFileArgs(path=path)))

    @mcp.tool()
    @auto_handle_exception
    async def repo_delete_file(
        path: str = Field(..., description="要删除的文件路径，相对仓库根目录"),
    ) -> FunctionResult:
        """
        删除文件，文件不存在时返回错误

        Returns:
            data 为 null
        """
        return await dispatcher.execute(DeleteFileCall(args=DeleteFileArgs(path=path)))

    @mcp.tool()
    @auto_handle_exception
    async def repo_move_file(
        source_path: str = Field(..., description="源文件路径，相对仓库根目录"),
        destination_path: str = Field(..., description="目标文件路径，相对仓库根目录"),
    ) -> FunctionResult:
        """
        移动或重命名文件，目标已存在时返回错误，自动创建目标的父目录

        Returns:
            data 为 null
        """
        return await dispatcher.execute(
            MoveFileCall(
                args=MoveFileArgs(source_path=source_path, destination_path=destination_path)
            )
        )

    @mcp.tool()
    @auto_handle_exception
    async def repo_modify_file(
        path: str = Field(..., description="要修改的文件路径，相对仓库根目录"),
        mode: ModificationMode = Field(
            ..., description="insert：在 start_line 处插入；replace：替换 start_line 到 end_line 的行"
        ),
        start_line: int = Field(..., description="起始行号（从 1 开始，包含）", ge=1),
        content: str = Field(..., description="新内容，可以包含多行；replace 模式下为空表示删除这些行"),
        end_line: Optional[int] = Field(
            None, description="结束行号（从 1 开始，包含），replace 模式必填", ge=1
        ),
    ) -> FunctionResult:
        """
        按行号修改文件内容

        Returns:
            data 为 {old_contents, new_contents}，即修改前后的完整文件内容
        """
        return await dispatcher.execute(
            ModifyFileCall(
                args=ModifyFileArgs(
                    path=path,
                    mode=mode,
                    start_line=start_line,
                    end_line=end_line,
                    content=content,
                )
            )
        )

    @mcp.tool()
    @auto_handle_exception
    async def repo_get_repository_info() -> Dict[str, Any]:
        """
        获取仓库服务配置信息
        """
        return _do_get_repository_info()

    # ===== 资源 (Resources) =====

    @mcp.resource("config://repository")
    async def get_config_resource() -> str:
        """
        获取仓库服务配置信息

        Returns:
            JSON格式的配置信息
        """
        return json.dumps(_do_get_repository_info(), indent=2, ensure_ascii=False)
