"""Server side of the MCP HTTP+SSE transport for one session.

A transport owns two queues: inbound JSON-RPC messages posted out of band,
and outbound messages streamed back over the SSE connection. A per-session
worker task drains the inbound queue in arrival order and hands each message
to the protocol engine.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import UTC, datetime
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError
from starlette.responses import PlainTextResponse, Response

from gdrive_mcp.api.exceptions import InvalidRequestError, SessionNotFoundError
from gdrive_mcp.observability.logging import get_logger
from gdrive_mcp.protocol.models import INTERNAL_ERROR, JSONRPCMessage, make_error
from gdrive_mcp.sessions.models import SessionState

logger = get_logger(__name__)

MessageHandler = Callable[[JSONRPCMessage], Awaitable[dict[str, Any] | None]]
CloseCallback = Callable[["SseTransport"], None]


class SseTransport:
    """Bidirectional channel between one SSE client and the protocol engine."""

    def __init__(
        self,
        session_id: str,
        message_path: str,
        handler: MessageHandler,
    ) -> None:
        """Initialize the transport.

        Args:
            session_id: Registry-generated identifier for this connection
            message_path: Path clients POST messages to
            handler: Coroutine turning one inbound message into an optional response
        """
        self.session_id = session_id
        self.message_path = message_path
        self.state = SessionState.OPEN
        self.opened_at = datetime.now(UTC)
        self.messages_received = 0

        self._handler = handler
        self._inbound: asyncio.Queue[JSONRPCMessage] = asyncio.Queue()
        self._outbound: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue()
        self._close_callbacks: list[CloseCallback] = []
        self._worker: asyncio.Task[None] | None = None

    @property
    def endpoint_url(self) -> str:
        """Relative URL announced in the first SSE event."""
        return f"{self.message_path}?sessionId={quote(self.session_id)}"

    @property
    def is_open(self) -> bool:
        return self.state is SessionState.OPEN

    def on_close(self, callback: CloseCallback) -> None:
        """Register a callback invoked once when the transport closes."""
        self._close_callbacks.append(callback)

    def start(self) -> None:
        """Start the worker that processes inbound messages."""
        if self._worker is None and self.is_open:
            self._worker = asyncio.create_task(
                self._run(), name=f"mcp-session-{self.session_id[:8]}"
            )

    async def handle_post_message(self, body: bytes) -> Response:
        """Accept one posted JSON-RPC message for this session.

        Args:
            body: Raw request body

        Returns:
            202 Accepted; the actual response travels over the SSE stream

        Raises:
            SessionNotFoundError: If the transport closed before delivery
            InvalidRequestError: If the body is not a JSON-RPC message
        """
        if not self.is_open:
            raise SessionNotFoundError("Unknown sessionId")

        try:
            payload = json.loads(body)
        except ValueError:
            raise InvalidRequestError("Invalid JSON") from None

        try:
            message = JSONRPCMessage.model_validate(payload)
        except ValidationError:
            raise InvalidRequestError("Invalid JSON-RPC message") from None

        self._inbound.put_nowait(message)
        self.messages_received += 1

        return PlainTextResponse("Accepted", status_code=202)

    def send(self, message: dict[str, Any]) -> bool:
        """Queue a message for the SSE stream.

        Returns:
            False when the session already closed and the message was dropped
        """
        if not self.is_open:
            logger.debug(
                "message_dropped_session_closed",
                session_id=self.session_id,
                message_id=message.get("id"),
            )
            return False
        self._outbound.put_nowait(message)
        return True

    async def event_stream(self) -> AsyncIterator[dict[str, str]]:
        """Yield SSE events until the transport closes or the client leaves.

        The first event tells the client where to post messages.
        """
        try:
            yield {"event": "endpoint", "data": self.endpoint_url}
            while True:
                message = await self._outbound.get()
                if message is None:
                    break
                yield {"event": "message", "data": json.dumps(message)}
        finally:
            self.close()

    def close(self) -> None:
        """Close the transport. Safe to call more than once."""
        if self.state is SessionState.CLOSED:
            return
        self.state = SessionState.CLOSED

        if self._worker is not None and not self._worker.done():
            self._worker.cancel()
        self._outbound.put_nowait(None)

        for callback in self._close_callbacks:
            try:
                callback(self)
            except Exception:
                logger.exception("session_close_callback_failed", session_id=self.session_id)

        logger.info(
            "sse_session_closed",
            session_id=self.session_id,
            messages_received=self.messages_received,
            duration_seconds=round((datetime.now(UTC) - self.opened_at).total_seconds(), 3),
        )

    async def _run(self) -> None:
        while True:
            message = await self._inbound.get()
            try:
                response = await self._handler(message)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception(
                    "session_message_failed",
                    session_id=self.session_id,
                    method=message.method,
                )
                response = None
                if message.id is not None and not message.is_response:
                    response = make_error(message.id, INTERNAL_ERROR, "Internal error")

            if response is not None:
                self.send(response)
