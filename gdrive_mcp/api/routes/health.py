"""Health check and metrics endpoints."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from gdrive_mcp.api.dependencies import SessionRegistryDep, SettingsDep
from gdrive_mcp.api.models.health import HealthResponse
from gdrive_mcp.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(registry: SessionRegistryDep, settings: SettingsDep) -> HealthResponse:
    """Liveness check with the number of open sessions."""
    logger.debug("health_check_request")
    return HealthResponse(service=settings.app_name, sessions=len(registry))


async def metrics() -> Response:
    """Prometheus metrics in text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
