"""API exception hierarchy for consistent error handling.

All API exceptions inherit from GdriveMCPError, which provides
status_code and error_code attributes used by the global exception
handler to generate consistent error responses.
"""

from gdrive_mcp.api.models.errors import ErrorCode


class GdriveMCPError(Exception):
    """Base exception for all HTTP-surface errors.

    Subclasses set status_code and error_code to define the HTTP response.
    """

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(GdriveMCPError):
    """Raised when a posted message is not valid JSON-RPC."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class UnauthorizedError(GdriveMCPError):
    """Raised when the shared API key is missing or wrong."""

    status_code = 401
    error_code = ErrorCode.UNAUTHORIZED


class RoutingError(GdriveMCPError):
    """Base class for failures to resolve a message to a session."""

    reason: str = "routing"


class MissingSessionIdError(RoutingError):
    """Raised when no carrier holds a session identifier."""

    status_code = 400
    error_code = ErrorCode.MISSING_SESSION_ID
    reason = "missing_session_id"


class SessionNotFoundError(RoutingError):
    """Raised when session_id doesn't match an open session."""

    status_code = 404
    error_code = ErrorCode.SESSION_NOT_FOUND
    reason = "session_not_found"


class SessionLimitExceededError(GdriveMCPError):
    """Raised when a new SSE connection would exceed the session cap."""

    status_code = 503
    error_code = ErrorCode.SESSION_LIMIT_EXCEEDED


class DuplicateSessionError(GdriveMCPError):
    """Raised when registering a session_id that is already registered."""

    status_code = 500
    error_code = ErrorCode.INTERNAL_ERROR
