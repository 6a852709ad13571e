"""FastAPI application factory.

Creates and configures the FastAPI application with middleware,
exception handlers, route registration and the component lifespan.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from gdrive_mcp import __version__
from gdrive_mcp.api.exceptions import GdriveMCPError
from gdrive_mcp.api.middleware.access_gate import AccessGateMiddleware
from gdrive_mcp.api.middleware.context import RequestContextMiddleware
from gdrive_mcp.api.models.errors import ErrorBody, ErrorCode, ErrorDetail, ErrorResponse
from gdrive_mcp.api.routes import register_routes
from gdrive_mcp.bootstrap import ServerComponents, build_components
from gdrive_mcp.config import get_settings
from gdrive_mcp.config.settings import Settings
from gdrive_mcp.observability.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Load credentials and start the refresh loop; tear down on exit."""
    components: ServerComponents = app.state.components

    credentials = await components.credentials.load_quietly()
    if credentials is None:
        logger.warning(
            "credentials_not_ready",
            path=str(components.settings.auth.credentials_path),
        )
    components.refresher.start()

    if components.settings.api.api_key is None:
        logger.warning("access_gate_disabled")

    logger.info(
        "server_started",
        host=components.settings.api.host,
        port=components.settings.api.port,
    )
    try:
        yield
    finally:
        await components.aclose()
        logger.info("server_stopped")


def create_app(
    settings: Settings | None = None,
    components: ServerComponents | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use (loaded from config when omitted)
        components: Prebuilt components (built from settings when omitted)

    Returns:
        Configured FastAPI application
    """
    if components is not None:
        settings = components.settings
    elif settings is None:
        settings = get_settings()
    if components is None:
        components = build_components(settings)

    app = FastAPI(
        title="MCP Google Drive Server",
        description="Model Context Protocol server for Google Drive over HTTP+SSE",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.components = components

    # Last added runs first: CORS, then the access gate, then request context
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(AccessGateMiddleware, api_key=settings.api.api_key)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=settings.api.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    register_routes(app, settings)

    logger.info(
        "app_created",
        cors_origins=settings.api.cors_origins,
        access_gate_enabled=settings.api.api_key is not None,
    )

    return app


def _error_response(status_code: int, body: ErrorBody) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=body).model_dump(mode="json", exclude_none=True),
    )


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers.

    Args:
        app: FastAPI application
    """

    @app.exception_handler(GdriveMCPError)
    async def api_error_handler(request: Request, exc: GdriveMCPError) -> JSONResponse:
        """Handle GdriveMCPError and its subclasses."""
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        return _error_response(exc.status_code, ErrorBody(code=exc.error_code, message=exc.message))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors."""
        logger.warning("validation_error", errors=exc.errors(), path=request.url.path)

        details = [
            ErrorDetail(field=".".join(str(loc) for loc in error["loc"]), message=error["msg"])
            for error in exc.errors()
        ]
        return _error_response(
            400,
            ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Request validation failed",
                details=details,
            ),
        )

    @app.exception_handler(ValidationError)
    async def pydantic_validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        logger.warning("pydantic_validation_error", errors=exc.errors(), path=request.url.path)

        details = [
            ErrorDetail(field=".".join(str(loc) for loc in error["loc"]), message=error["msg"])
            for error in exc.errors()
        ]
        return _error_response(
            400,
            ErrorBody(
                code=ErrorCode.INVALID_REQUEST,
                message="Data validation failed",
                details=details,
            ),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return _error_response(
            500,
            ErrorBody(code=ErrorCode.INTERNAL_ERROR, message="An unexpected error occurred"),
        )

    logger.debug("exception_handlers_registered")
