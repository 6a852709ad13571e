"""Shared API key check applied to every request."""

import secrets
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from gdrive_mcp.api.exceptions import UnauthorizedError
from gdrive_mcp.api.models.errors import ErrorBody, ErrorResponse
from gdrive_mcp.observability.logging import get_logger

logger = get_logger(__name__)

API_KEY_HEADER = "x-api-key"
API_KEY_QUERY_PARAM = "api_key"


def provided_api_key(request: Request) -> str | None:
    """Key from the header, falling back to the query string."""
    return request.headers.get(API_KEY_HEADER) or request.query_params.get(API_KEY_QUERY_PARAM)


def unauthorized_response(exc: UnauthorizedError) -> JSONResponse:
    """Error body for a rejected key, built from the API exception."""
    body = ErrorResponse(error=ErrorBody(code=exc.error_code, message=exc.message))
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


class AccessGateMiddleware(BaseHTTPMiddleware):
    """Rejects requests that do not present the configured API key.

    With no key configured every request passes through.
    """

    def __init__(self, app: Callable[..., Any], api_key: str | None = None) -> None:
        super().__init__(app)
        self._api_key = api_key

    @property
    def enabled(self) -> bool:
        return self._api_key is not None

    async def dispatch(  # type: ignore[override]
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        if self._api_key is None:
            return await call_next(request)  # type: ignore[no-any-return, misc]

        provided = provided_api_key(request)
        if provided is None or not secrets.compare_digest(
            provided.encode(), self._api_key.encode()
        ):
            logger.warning(
                "access_denied",
                path=request.url.path,
                key_present=provided is not None,
            )
            return unauthorized_response(UnauthorizedError("Unauthorized: Invalid API key"))

        return await call_next(request)  # type: ignore[no-any-return, misc]
