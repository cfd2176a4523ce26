#!/usr/bin/env python3
"""
MCP Repository Editor

Lets a remote controller inspect and edit the files of a local git working
tree, either over a websocket controller link or as an MCP server.
"""

import logging
import os
import sys
from typing import Optional

import anyio
import click
from pydantic import BaseModel, Field

from .dispatcher.dispatcher import CommandDispatcher
from .dispatcher.exceptions import TransportError
from .dispatcher.printer import ConsoleExecutionPrinter, LoggingExecutionSink
from .dispatcher.websocket_transport import WebSocketTransport
from .filesystem.exceptions import RepositoryEditorError
from .filesystem.filesystem_service import FilesystemService
from .filtered_fast_mcp import FilteredFastMCP
from .repository import RepositoryContext

logger = logging.getLogger(__name__)

DEFAULT_CONTROLLER_URL = "ws://localhost:5000"


def setup_logger(mode: str, debug: bool = False) -> logging.Logger:
    """Setup logger based on run mode and debug flag."""
    logger = logging.getLogger("")

    # Remove existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    # stdout carries the MCP protocol in stdio mode and the change display in
    # connect mode, so logs go to stderr there
    if mode in ("stdio", "connect"):
        stream = sys.stderr
    else:
        stream = sys.stdout

    if debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    handler = logging.StreamHandler(stream)
    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - %(threadName)s - %(name)s:%(lineno)d - %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # 通过 LOG_FILE_PATH 配置文件路径
    log_file_path = os.getenv("LOG_FILE_PATH")
    if log_file_path:
        file_handler = logging.FileHandler(log_file_path, mode="w", encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.setLevel(level)
    logger.debug(f"debug: {debug}")
    logger.info(f"log_file_path: {log_file_path}")
    logger.info(f"sys.getfilesystemencoding(): {sys.getfilesystemencoding()}")

    return logging.getLogger(__name__)


def parse_bool_env(name: str) -> bool:
    """Parse a boolean environment variable ("1", "true", "yes", "on")."""
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")


class EditorSettings(BaseModel):
    """
    命令行参数与环境变量合并后的配置
    """

    repository_dir: str = Field(description="仓库目录，会向上查找最近的 git 工作区")
    controller_url: str = Field(description="控制端 websocket 地址")
    default_encoding: str = Field(description="文本文件编码")
    debug: bool = Field(description="是否输出 DEBUG 日志")


def parse_settings(
    directory: Optional[str] = None,
    url: Optional[str] = None,
    debug: bool = False,
) -> EditorSettings:
    """
    解析配置，命令行参数优先，其次是环境变量，最后是默认值
    """
    return EditorSettings(
        repository_dir=directory or os.getenv("REPOSITORY_DIR") or "./",
        controller_url=url or os.getenv("CONTROLLER_URL") or DEFAULT_CONTROLLER_URL,
        default_encoding=os.getenv("DEFAULT_ENCODING") or "utf-8",
        debug=debug or parse_bool_env("DEBUG"),
    )


def create_filesystem_service(settings: EditorSettings) -> FilesystemService:
    """Open the repository and create the FilesystemService bound to it."""
    repository = RepositoryContext.open(settings.repository_dir)
    return FilesystemService(repository, encoding=settings.default_encoding)


async def _run_connect(query: str, settings: EditorSettings):
    """Connect to the controller, send the query and serve its calls."""
    logger = setup_logger("connect", settings.debug)
    logger.info("Default encoding: %s", settings.default_encoding)

    filesystem_service = create_filesystem_service(settings)
    dispatcher = CommandDispatcher(filesystem_service, ConsoleExecutionPrinter())

    async with WebSocketTransport(settings.controller_url) as transport:
        await transport.send(query)
        await dispatcher.run(transport)


async def _run_mcp_server(
    mode: str,
    host: str,
    port: int,
    path: str,
    settings: EditorSettings,
):
    """Run the MCP server in the specified mode."""
    logger = setup_logger(mode, settings.debug)

    filesystem_service = create_filesystem_service(settings)
    dispatcher = CommandDispatcher(filesystem_service, LoggingExecutionSink())

    mcp = FilteredFastMCP(
        name="repository-editor", host=host, port=port, streamable_http_path=path
    )

    from .filesystem.server import define_mcp_server

    define_mcp_server(
        mcp=mcp,
        dispatcher=dispatcher,
        repository_root=str(filesystem_service.repository.root),
    )

    logger.info("Starting MCP Repository Editor Server in %s mode...", mode)
    try:
        if mode == "stdio":
            await mcp.run_stdio_async()
        elif mode == "sse":
            logger.info("Starting SSE server on %s:%s", host, port)
            await mcp.run_sse_async()
        elif mode == "http":
            logger.info("Starting HTTP server on %s:%s", host, port)
            logger.info("MCP API endpoint: http://%s:%s%s", host, port, path)
            await mcp.run_streamable_http_async()
    except KeyboardInterrupt:
        logger.info("Shutting down server...")


@click.group()
@click.version_option()
def main():
    """MCP Repository Editor - remote line-addressed editing of a git working tree."""
    pass


@main.command("connect")
@click.option("--query", "-q", required=True, help="Query sent to the controller once connected")
@click.option(
    "--directory",
    default=None,
    help="Repository directory (default: $REPOSITORY_DIR or ./)",
)
@click.option(
    "--url",
    default=None,
    help=f"Controller websocket URL (default: $CONTROLLER_URL or {DEFAULT_CONTROLLER_URL})",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (sets logging to DEBUG)",
)
def connect(query: str, directory: Optional[str], url: Optional[str], debug: bool):
    """Connect to a controller and execute the calls it sends."""
    settings = parse_settings(directory, url, debug)
    try:
        anyio.run(_run_connect, query, settings)
        logger.info("Controller session ended")
    except (RepositoryEditorError, TransportError) as e:
        logger.error("Controller session failed: %s", e)
        sys.exit(1)


@main.command("mcp-server")
@click.option(
    "--mode",
    type=click.Choice(["stdio", "sse", "http"]),
    default="stdio",
    help="Server mode: stdio (default), sse, or http",
)
@click.option(
    "--host",
    default="127.0.0.1",
    help="Host address for SSE/HTTP modes (default: 127.0.0.1)",
)
@click.option(
    "--port", type=int, default=8000, help="Port for SSE/HTTP modes (default: 8000)"
)
@click.option(
    "--path", default="/mcp", help="API endpoint path for HTTP mode (default: /mcp)"
)
@click.option(
    "--directory",
    default=None,
    help="Repository directory (default: $REPOSITORY_DIR or ./)",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (sets logging to DEBUG)",
)
def mcp_server(
    mode: str,
    host: str,
    port: int,
    path: str,
    directory: Optional[str],
    debug: bool,
):
    """Start the MCP Repository Editor Server."""
    settings = parse_settings(directory, None, debug)
    try:
        anyio.run(_run_mcp_server, mode, host, port, path, settings)
        logger.info("Server exited")
    except RepositoryEditorError as e:
        logger.error("Server exited with error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
