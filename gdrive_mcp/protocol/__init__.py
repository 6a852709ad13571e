"""MCP protocol handling over JSON-RPC 2.0."""

from gdrive_mcp.protocol.engine import ProtocolEngine
from gdrive_mcp.protocol.models import JSONRPCMessage, make_error, make_result

__all__ = ["JSONRPCMessage", "ProtocolEngine", "make_error", "make_result"]
