"""API request/response models."""

from gdrive_mcp.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from gdrive_mcp.api.models.health import HealthResponse

__all__ = [
    "ErrorBody",
    "ErrorCode",
    "ErrorDetail",
    "ErrorResponse",
    "HealthResponse",
]
