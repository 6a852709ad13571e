"""HTTP middleware."""

from gdrive_mcp.api.middleware.access_gate import AccessGateMiddleware
from gdrive_mcp.api.middleware.context import RequestContextMiddleware, get_request_id

__all__ = ["AccessGateMiddleware", "RequestContextMiddleware", "get_request_id"]
