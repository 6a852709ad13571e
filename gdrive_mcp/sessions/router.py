"""Routing of out-of-band POSTed messages to their SSE session.

The session id may travel in several carriers. They are tried in the order
of SESSION_ID_EXTRACTORS and the first non-empty value wins.
"""

import json
from collections.abc import Callable, Sequence
from typing import Any

from fastapi import Request, Response

from gdrive_mcp.api.exceptions import MissingSessionIdError, SessionNotFoundError
from gdrive_mcp.observability.logging import get_logger
from gdrive_mcp.observability.metrics import MESSAGES_ROUTED, ROUTING_FAILURES
from gdrive_mcp.sessions.models import Session
from gdrive_mcp.sessions.registry import SessionRegistry

logger = get_logger(__name__)

SessionIdExtractor = Callable[[Request, Any], str | None]

SESSION_QUERY_PARAM = "sessionId"
SESSION_BODY_FIELD = "sessionId"
SESSION_HEADER_NAMES: tuple[str, ...] = (
    "x-session-id",
    "x-sse-session-id",
    "x-mcp-session-id",
    "x-client-session-id",
)


def from_query(request: Request, _body: Any) -> str | None:
    return request.query_params.get(SESSION_QUERY_PARAM)


def from_header(name: str) -> SessionIdExtractor:
    """Build an extractor reading one header."""

    def extract(request: Request, _body: Any) -> str | None:
        return request.headers.get(name)

    extract.__name__ = f"from_header[{name}]"
    return extract


def from_body(_request: Request, body: Any) -> str | None:
    if isinstance(body, dict):
        value = body.get(SESSION_BODY_FIELD)
        if isinstance(value, str):
            return value
    return None


SESSION_ID_EXTRACTORS: tuple[SessionIdExtractor, ...] = (
    from_query,
    *(from_header(name) for name in SESSION_HEADER_NAMES),
    from_body,
)


def extract_session_id(
    request: Request,
    body: Any,
    extractors: Sequence[SessionIdExtractor] = SESSION_ID_EXTRACTORS,
) -> str | None:
    """Return the first non-empty session id found by the extractors."""
    for extractor in extractors:
        session_id = extractor(request, body)
        if session_id:
            return session_id
    return None


def _decode_body(body: bytes) -> Any:
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        return None


class RequestRouter:
    """Resolves posted messages to exactly one open session and delivers them.

    The router never interprets message contents; the session transport
    validates and queues them.
    """

    def __init__(
        self,
        registry: SessionRegistry,
        extractors: Sequence[SessionIdExtractor] = SESSION_ID_EXTRACTORS,
    ) -> None:
        self._registry = registry
        self._extractors = tuple(extractors)

    def resolve(self, session_id: str | None) -> Session:
        """Look up the open session for an id.

        Raises:
            MissingSessionIdError: If no id was supplied
            SessionNotFoundError: If the id matches no open session
        """
        if not session_id:
            ROUTING_FAILURES.labels(reason=MissingSessionIdError.reason).inc()
            raise MissingSessionIdError("Missing sessionId")

        session = self._registry.lookup(session_id)
        if session is None or not session.is_open:
            ROUTING_FAILURES.labels(reason=SessionNotFoundError.reason).inc()
            logger.info("message_for_unknown_session", session_id=session_id)
            raise SessionNotFoundError("Unknown sessionId")
        return session

    async def route(self, request: Request) -> Response:
        """Deliver one posted message to its session's transport."""
        body = await request.body()
        session_id = extract_session_id(request, _decode_body(body), self._extractors)
        session = self.resolve(session_id)

        response = await session.transport.handle_post_message(body)

        MESSAGES_ROUTED.inc()
        logger.debug(
            "message_routed",
            session_id=session.session_id,
            path=request.url.path,
        )
        return response
