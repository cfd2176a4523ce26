#!/usr/bin/env python3
"""
MCP Repository Editor - Main Entry Point

This module provides the main entry point for the MCP Repository Editor,
which includes the websocket controller client and the MCP server.
"""

from mcp_repo_editor.server import main

if __name__ == "__main__":
    main()
