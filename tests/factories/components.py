"""Builds ServerComponents around test doubles."""

from typing import Any

from gdrive_mcp.auth.provider import CredentialProvider
from gdrive_mcp.auth.refresh import CredentialRefresher
from gdrive_mcp.bootstrap import ServerComponents
from gdrive_mcp.config.settings import Settings
from gdrive_mcp.protocol.engine import ProtocolEngine
from gdrive_mcp.protocol.models import JSONRPCMessage
from gdrive_mcp.resources.adapter import ResourceAdapter
from gdrive_mcp.sessions.models import Session
from gdrive_mcp.sessions.registry import SessionRegistry
from gdrive_mcp.sessions.router import RequestRouter
from gdrive_mcp.sessions.transport import SseTransport
from gdrive_mcp.tools import build_tool_registry
from tests.factories.drive import FakeDriveClient


def build_test_components(
    settings: Settings,
    drive: FakeDriveClient,
    credentials: CredentialProvider,
) -> ServerComponents:
    """Wire the real protocol stack to a fake Drive client."""
    tools = build_tool_registry(drive)  # type: ignore[arg-type]
    resources = ResourceAdapter(
        drive,  # type: ignore[arg-type]
        tools,
        page_size=settings.drive.page_size,
    )
    engine = ProtocolEngine(
        tools=tools,
        resources=resources,
        credentials=credentials,
        request_timeout_seconds=settings.api.request_timeout_seconds,
    )
    sessions = SessionRegistry(max_sessions=settings.api.max_sessions)
    return ServerComponents(
        settings=settings,
        sessions=sessions,
        router=RequestRouter(sessions),
        credentials=credentials,
        refresher=CredentialRefresher(
            credentials, interval_seconds=settings.auth.refresh_interval_seconds
        ),
        drive=drive,  # type: ignore[arg-type]
        tools=tools,
        resources=resources,
        engine=engine,
    )


async def _ignore(message: JSONRPCMessage) -> dict[str, Any] | None:
    return None


def open_idle_session(components: ServerComponents) -> Session:
    """Register a session whose transport has no worker running."""
    return components.sessions.open(
        lambda session_id: SseTransport(
            session_id, components.settings.api.message_path, _ignore
        )
    )
