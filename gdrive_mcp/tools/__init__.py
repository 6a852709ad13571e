"""MCP tools backed by Google Drive and Sheets."""

from gdrive_mcp.drive.client import DriveClient
from gdrive_mcp.tools.base import (
    RawContent,
    TextContent,
    ToolDescriptor,
    ToolResponse,
)
from gdrive_mcp.tools.read_file import build_read_file_tool
from gdrive_mcp.tools.registry import DuplicateToolError, ToolNotFoundError, ToolRegistry
from gdrive_mcp.tools.search import build_search_tool
from gdrive_mcp.tools.sheets import build_sheets_read_tool, build_update_cell_tool


def build_tool_registry(drive: DriveClient) -> ToolRegistry:
    """Register the built-in tools in listing order."""
    registry = ToolRegistry()
    registry.register(build_search_tool(drive))
    registry.register(build_read_file_tool(drive))
    registry.register(build_sheets_read_tool(drive))
    registry.register(build_update_cell_tool(drive))
    return registry


__all__ = [
    "DuplicateToolError",
    "RawContent",
    "TextContent",
    "ToolDescriptor",
    "ToolNotFoundError",
    "ToolRegistry",
    "ToolResponse",
    "build_tool_registry",
]
