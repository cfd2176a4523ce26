"""Filtered FastMCP implementation for environment variable based filtering."""

import os
from typing import List
from urllib.parse import urlparse

from mcp.server.fastmcp import FastMCP
from mcp.types import Resource as MCPResource
from mcp.types import ResourceTemplate as MCPResourceTemplate
from mcp.types import Tool as MCPTool


def _parse_name_list(env_name: str) -> List[str]:
    """Parse a comma separated environment variable into a list of names."""
    return [name.strip() for name in os.getenv(env_name, "").split(",") if name.strip()]


def _should_include(name: str, disable_env: str, enable_only_env: str) -> bool:
    enabled_only = _parse_name_list(enable_only_env)
    if enabled_only:
        return name in enabled_only
    return name not in _parse_name_list(disable_env)


def should_include_tool(tool_name: str) -> bool:
    """Check a tool against ENABLE_TOOLS_ONLY (takes precedence) and DISABLE_TOOLS."""
    return _should_include(tool_name, "DISABLE_TOOLS", "ENABLE_TOOLS_ONLY")


def should_include_resource(resource_type: str) -> bool:
    """Check a resource scheme against ENABLE_RESOURCES_ONLY and DISABLE_RESOURCES."""
    return _should_include(resource_type, "DISABLE_RESOURCES", "ENABLE_RESOURCES_ONLY")


def extract_resource_type(uri: str) -> str:
    """Extract the resource type (URI scheme), e.g. ``config`` for ``config://repository``."""
    return urlparse(uri).scheme or "unknown"


class FilteredFastMCP(FastMCP):
    """FastMCP subclass that supports filtering tools and resources via environment variables."""

    async def list_tools(self) -> List[MCPTool]:
        """List tools filtered by environment variables."""
        tools = await super().list_tools()
        return [tool for tool in tools if should_include_tool(tool.name)]

    async def list_resources(self) -> List[MCPResource]:
        """List resources filtered by environment variables."""
        resources = await super().list_resources()
        return [
            resource
            for resource in resources
            if should_include_resource(extract_resource_type(str(resource.uri)))
        ]

    async def list_resource_templates(self) -> List[MCPResourceTemplate]:
        """List resource templates filtered by environment variables."""
        templates = await super().list_resource_templates()
        return [
            template
            for template in templates
            if should_include_resource(extract_resource_type(template.uriTemplate))
        ]
