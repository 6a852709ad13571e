"""Session tracking and out-of-band message routing for SSE clients."""

from gdrive_mcp.sessions.models import Session, SessionState
from gdrive_mcp.sessions.registry import SessionRegistry, new_session_id
from gdrive_mcp.sessions.router import (
    SESSION_HEADER_NAMES,
    SESSION_ID_EXTRACTORS,
    RequestRouter,
    extract_session_id,
)
from gdrive_mcp.sessions.transport import SseTransport

__all__ = [
    "RequestRouter",
    "SESSION_HEADER_NAMES",
    "SESSION_ID_EXTRACTORS",
    "Session",
    "SessionRegistry",
    "SessionState",
    "SseTransport",
    "extract_session_id",
    "new_session_id",
]
