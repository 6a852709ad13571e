"""Wiring of the server's long-lived components from settings.

Everything the HTTP layer needs is built once here and kept on
``app.state.components``. Tests pass their own ServerComponents to
``create_app`` to swap in fakes.

Example usage:

    from gdrive_mcp.bootstrap import build_components
    from gdrive_mcp.config import get_settings

    components = build_components(get_settings())
    await components.credentials.load_quietly()
"""

from dataclasses import dataclass

from gdrive_mcp.auth.errors import OAuthClientConfigError
from gdrive_mcp.auth.provider import CredentialProvider, resolve_oauth_client
from gdrive_mcp.auth.refresh import CredentialRefresher
from gdrive_mcp.auth.store import CredentialStore
from gdrive_mcp.config.settings import Settings
from gdrive_mcp.drive.client import DriveClient
from gdrive_mcp.observability.logging import get_logger
from gdrive_mcp.protocol.engine import ProtocolEngine
from gdrive_mcp.resources.adapter import ResourceAdapter
from gdrive_mcp.sessions.registry import SessionRegistry
from gdrive_mcp.sessions.router import RequestRouter
from gdrive_mcp.tools import build_tool_registry
from gdrive_mcp.tools.registry import ToolRegistry

logger = get_logger(__name__)


class StartupError(Exception):
    """The server cannot start with the given configuration."""


@dataclass
class ServerComponents:
    """Long-lived collaborators shared by every request and session."""

    settings: Settings
    sessions: SessionRegistry
    router: RequestRouter
    credentials: CredentialProvider
    refresher: CredentialRefresher
    drive: DriveClient
    tools: ToolRegistry
    resources: ResourceAdapter
    engine: ProtocolEngine

    async def aclose(self) -> None:
        """Release sessions, the refresh task and HTTP clients."""
        closed = self.sessions.close_all()
        await self.refresher.stop()
        await self.drive.aclose()
        await self.credentials.aclose()
        logger.info("components_closed", sessions_closed=closed)


def build_components(settings: Settings) -> ServerComponents:
    """Create all server components.

    Raises:
        StartupError: If the OAuth client keys file exists but is unusable
    """
    try:
        oauth_client = resolve_oauth_client(settings.auth)
    except OAuthClientConfigError as e:
        raise StartupError(str(e)) from e

    credentials = CredentialProvider(
        store=CredentialStore(settings.auth.credentials_path),
        oauth_client=oauth_client,
        refresh_margin_seconds=settings.auth.refresh_margin_seconds,
        timeout_seconds=settings.drive.timeout_seconds,
    )
    refresher = CredentialRefresher(
        credentials, interval_seconds=settings.auth.refresh_interval_seconds
    )

    drive = DriveClient(
        token_source=lambda: credentials.access_token,
        drive_api_url=settings.drive.drive_api_url,
        sheets_api_url=settings.drive.sheets_api_url,
        timeout_seconds=settings.drive.timeout_seconds,
    )
    tools = build_tool_registry(drive)
    resources = ResourceAdapter(drive, tools, page_size=settings.drive.page_size)
    engine = ProtocolEngine(
        tools=tools,
        resources=resources,
        credentials=credentials,
        request_timeout_seconds=settings.api.request_timeout_seconds,
    )

    sessions = SessionRegistry(max_sessions=settings.api.max_sessions)
    router = RequestRouter(sessions)

    logger.info(
        "components_built",
        tools=[tool.name for tool in tools],
        max_sessions=settings.api.max_sessions,
        oauth_client_configured=oauth_client is not None,
    )

    return ServerComponents(
        settings=settings,
        sessions=sessions,
        router=router,
        credentials=credentials,
        refresher=refresher,
        drive=drive,
        tools=tools,
        resources=resources,
        engine=engine,
    )
