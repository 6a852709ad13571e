"""Registry of open SSE sessions keyed by session id."""

from collections.abc import Callable, Iterator
from uuid import uuid4

from gdrive_mcp.api.exceptions import DuplicateSessionError, SessionLimitExceededError
from gdrive_mcp.observability.logging import get_logger
from gdrive_mcp.observability.metrics import (
    ACTIVE_SESSIONS,
    SESSIONS_OPENED,
    SESSIONS_REJECTED,
)
from gdrive_mcp.sessions.models import Session
from gdrive_mcp.sessions.transport import SseTransport

logger = get_logger(__name__)


def new_session_id() -> str:
    """Generate an opaque, unguessable session identifier."""
    return str(uuid4())


class SessionRegistry:
    """Owns the set of currently open sessions.

    Every mutation is a single synchronous step, so callers on the event
    loop never observe a half-updated registry.
    """

    def __init__(
        self,
        max_sessions: int | None = None,
        id_factory: Callable[[], str] = new_session_id,
    ) -> None:
        """Initialize the registry.

        Args:
            max_sessions: Cap on concurrently open sessions (None for no cap)
            id_factory: Source of fresh session identifiers
        """
        self._sessions: dict[str, Session] = {}
        self._max_sessions = max_sessions
        self._id_factory = id_factory

    def open(self, transport_factory: Callable[[str], SseTransport]) -> Session:
        """Create and register a transport under a freshly generated id.

        The transport is wired to remove itself from the registry on close.

        Args:
            transport_factory: Builds the transport for a given session id

        Returns:
            The registered session

        Raises:
            SessionLimitExceededError: If the session cap is reached
        """
        self._check_capacity()

        session_id = self._id_factory()
        while session_id in self._sessions:
            session_id = self._id_factory()

        transport = transport_factory(session_id)
        session = Session(session_id=session_id, transport=transport)
        self.register(session)
        transport.on_close(lambda closed: self.remove(closed.session_id))
        return session

    def register(self, session: Session) -> None:
        """Insert a session.

        Raises:
            DuplicateSessionError: If the id is already registered
            SessionLimitExceededError: If the session cap is reached
        """
        if session.session_id in self._sessions:
            raise DuplicateSessionError(f"Session {session.session_id} already registered")
        self._check_capacity()

        self._sessions[session.session_id] = session
        SESSIONS_OPENED.inc()
        ACTIVE_SESSIONS.set(len(self._sessions))
        logger.info(
            "sse_session_opened",
            session_id=session.session_id,
            active_sessions=len(self._sessions),
        )

    def remove(self, session_id: str) -> Session | None:
        """Remove a session. Removing an unknown id is a no-op.

        Returns:
            The removed session, or None if it was not registered
        """
        session = self._sessions.pop(session_id, None)
        if session is not None:
            ACTIVE_SESSIONS.set(len(self._sessions))
            logger.debug(
                "sse_session_removed",
                session_id=session_id,
                active_sessions=len(self._sessions),
            )
        return session

    def lookup(self, session_id: str) -> Session | None:
        """Return the open session for an id, or None."""
        return self._sessions.get(session_id)

    def session_ids(self) -> list[str]:
        return list(self._sessions)

    def close_all(self) -> int:
        """Close every open transport. Used at shutdown.

        Returns:
            Number of sessions closed
        """
        sessions = list(self._sessions.values())
        for session in sessions:
            session.transport.close()
        self._sessions.clear()
        ACTIVE_SESSIONS.set(0)
        return len(sessions)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))

    def _check_capacity(self) -> None:
        if self._max_sessions is not None and len(self._sessions) >= self._max_sessions:
            SESSIONS_REJECTED.inc()
            logger.warning(
                "sse_session_rejected",
                active_sessions=len(self._sessions),
                max_sessions=self._max_sessions,
            )
            raise SessionLimitExceededError(
                f"Too many open sessions (limit {self._max_sessions})"
            )
