"""API route registration."""

from fastapi import FastAPI

from gdrive_mcp.config.settings import Settings
from gdrive_mcp.observability.logging import get_logger

logger = get_logger(__name__)


def register_routes(app: FastAPI, settings: Settings) -> None:
    """Register all routes with the FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Settings deciding the message and metrics paths
    """
    from gdrive_mcp.api.routes.health import metrics
    from gdrive_mcp.api.routes.health import router as health_router
    from gdrive_mcp.api.routes.sse import post_message
    from gdrive_mcp.api.routes.sse import router as sse_router

    app.include_router(health_router, tags=["Health"])
    app.include_router(sse_router, tags=["MCP"])

    if settings.api.message_path != "/message":
        app.add_api_route(
            settings.api.message_path, post_message, methods=["POST"], status_code=202
        )

    metrics_config = settings.observability.metrics
    if metrics_config.enabled:
        app.add_api_route(metrics_config.path, metrics, methods=["GET"], tags=["Health"])

    logger.info(
        "routes_registered",
        message_path=settings.api.message_path,
        metrics_enabled=metrics_config.enabled,
    )
