"""Request context middleware for observability."""

import uuid
from collections.abc import Callable
from contextvars import ContextVar

import structlog
from fastapi import Request, Response
from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware

from gdrive_mcp.observability.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    """Request id of the request being handled, if any."""
    return _request_id.get()


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns each request an id and binds it to the log context.

    The id is the active OpenTelemetry trace id when there is one, otherwise
    a fresh uuid4.
    """

    async def dispatch(  # type: ignore[override]
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        span_context = trace.get_current_span().get_span_context()
        trace_id = format(span_context.trace_id, "032x") if span_context.is_valid else ""
        request_id = trace_id or str(uuid.uuid4())

        token = _request_id.set(request_id)
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(request_id=request_id)

        logger.debug("request_started", method=request.method, path=request.url.path)
        try:
            response = await call_next(request)  # type: ignore[misc]
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
            _request_id.reset(token)

        logger.debug(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response  # type: ignore[no-any-return]
