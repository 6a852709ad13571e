"""mcp-gdrive: Google Drive exposed as an MCP server over HTTP + SSE."""

__version__ = "0.2.0"
