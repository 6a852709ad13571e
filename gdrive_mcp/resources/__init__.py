"""Drive files as MCP resources."""

from gdrive_mcp.resources.adapter import (
    URI_PREFIX,
    InvalidResourceUriError,
    ResourceAdapter,
    parse_resource_uri,
    resource_uri,
)

__all__ = [
    "URI_PREFIX",
    "InvalidResourceUriError",
    "ResourceAdapter",
    "parse_resource_uri",
    "resource_uri",
]
