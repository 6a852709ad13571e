"""Error response models for consistent API error handling."""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Standardized error codes for HTTP error responses."""

    INVALID_REQUEST = "INVALID_REQUEST"
    """Request validation failed (malformed JSON, not a JSON-RPC message, etc.)."""

    UNAUTHORIZED = "UNAUTHORIZED"
    """The shared API key was missing or did not match."""

    MISSING_SESSION_ID = "MISSING_SESSION_ID"
    """No session identifier was found in any carrier."""

    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    """The session identifier does not match an open SSE session."""

    SESSION_LIMIT_EXCEEDED = "SESSION_LIMIT_EXCEEDED"
    """The server already holds the maximum number of open sessions."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class ErrorDetail(BaseModel):
    """Field-level error information for validation failures."""

    field: str | None = None
    message: str


class ErrorBody(BaseModel):
    """Error body content for API error responses."""

    code: ErrorCode
    """Machine-readable error code."""

    message: str
    """Human-readable error message."""

    details: list[ErrorDetail] | None = None
    """Additional error details for validation failures."""


class ErrorResponse(BaseModel):
    """Standard error response format for all HTTP errors.

    Example:
        {
            "error": {
                "code": "SESSION_NOT_FOUND",
                "message": "Unknown sessionId"
            }
        }
    """

    error: ErrorBody
