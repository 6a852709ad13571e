"""SSE stream and out-of-band message endpoints."""

from fastapi import APIRouter, Request, Response
from sse_starlette.sse import EventSourceResponse
from starlette.background import BackgroundTask

from gdrive_mcp.api.dependencies import (
    ProtocolEngineDep,
    RequestRouterDep,
    SessionRegistryDep,
    SettingsDep,
)
from gdrive_mcp.observability.logging import get_logger
from gdrive_mcp.sessions.transport import SseTransport

logger = get_logger(__name__)

router = APIRouter()


@router.get("/sse")
async def open_stream(
    request: Request,
    registry: SessionRegistryDep,
    engine: ProtocolEngineDep,
    settings: SettingsDep,
) -> EventSourceResponse:
    """Open an SSE session.

    The first event announces the URL to POST messages to; responses then
    arrive as `message` events until the client disconnects.
    """
    session = registry.open(
        lambda session_id: SseTransport(
            session_id=session_id,
            message_path=settings.api.message_path,
            handler=engine.handle,
        )
    )
    session.transport.start()

    logger.info(
        "sse_stream_started",
        session_id=session.session_id,
        client=request.client.host if request.client else None,
    )

    return EventSourceResponse(
        session.transport.event_stream(),
        ping=settings.api.sse_ping_seconds,
        background=BackgroundTask(session.transport.close),
    )


@router.post("/message", status_code=202)
async def post_message(request: Request, message_router: RequestRouterDep) -> Response:
    """Deliver a JSON-RPC message to its session."""
    return await message_router.route(request)


@router.post("/sse", status_code=202, include_in_schema=False)
async def post_message_legacy(request: Request, message_router: RequestRouterDep) -> Response:
    """Same as POST /message, for clients that post to the stream URL."""
    return await message_router.route(request)
