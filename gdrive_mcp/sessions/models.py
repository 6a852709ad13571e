"""Session models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gdrive_mcp.sessions.transport import SseTransport


class SessionState(str, Enum):
    """Lifecycle of one streaming connection."""

    OPEN = "open"
    CLOSED = "closed"


@dataclass
class Session:
    """One open SSE connection as tracked by the registry.

    The transport owns the live state; the registry entry only pairs it
    with its identifier and bookkeeping.
    """

    session_id: str
    transport: SseTransport
    opened_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def state(self) -> SessionState:
        return self.transport.state

    @property
    def is_open(self) -> bool:
        return self.transport.state is SessionState.OPEN
