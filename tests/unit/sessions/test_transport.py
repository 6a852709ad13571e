"""Tests for the per-session SSE transport."""

import asyncio
import json
from typing import Any

import pytest

from gdrive_mcp.api.exceptions import InvalidRequestError, SessionNotFoundError
from gdrive_mcp.protocol.models import INTERNAL_ERROR, JSONRPCMessage, make_result
from gdrive_mcp.sessions.models import SessionState
from gdrive_mcp.sessions.transport import SseTransport


async def echo_handler(message: JSONRPCMessage) -> dict[str, Any] | None:
    if message.id is None:
        return None
    return make_result(message.id, {"method": message.method})


def request_body(request_id: int, method: str = "ping") -> bytes:
    return json.dumps({"jsonrpc": "2.0", "id": request_id, "method": method}).encode()


async def next_event(stream: Any) -> dict[str, str]:
    return await asyncio.wait_for(stream.__anext__(), timeout=2)


class TestSseTransport:
    """Tests for SseTransport."""

    def test_endpoint_url_carries_session_id(self) -> None:
        transport = SseTransport("abc-123", "/message", echo_handler)
        assert transport.endpoint_url == "/message?sessionId=abc-123"

    async def test_first_event_is_endpoint(self) -> None:
        transport = SseTransport("abc", "/message", echo_handler)
        stream = transport.event_stream()

        event = await next_event(stream)

        assert event == {"event": "endpoint", "data": "/message?sessionId=abc"}
        await stream.aclose()

    async def test_responses_stream_in_arrival_order(self) -> None:
        """Messages within one session are answered in the order posted."""
        transport = SseTransport("abc", "/message", echo_handler)
        transport.start()
        stream = transport.event_stream()
        await next_event(stream)

        for i in range(5):
            response = await transport.handle_post_message(request_body(i))
            assert response.status_code == 202

        ids = [json.loads((await next_event(stream))["data"])["id"] for _ in range(5)]
        assert ids == [0, 1, 2, 3, 4]
        await stream.aclose()

    async def test_notifications_produce_no_event(self) -> None:
        transport = SseTransport("abc", "/message", echo_handler)
        transport.start()
        stream = transport.event_stream()
        await next_event(stream)

        note = {"jsonrpc": "2.0", "method": "notifications/initialized"}
        await transport.handle_post_message(json.dumps(note).encode())
        await transport.handle_post_message(request_body(7))

        event = await next_event(stream)
        assert json.loads(event["data"])["id"] == 7
        await stream.aclose()

    async def test_handler_failure_answers_internal_error(self) -> None:
        """A crashing handler does not kill the session worker."""
        calls = 0

        async def flaky(message: JSONRPCMessage) -> dict[str, Any] | None:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("boom")
            return make_result(message.id or 0, {})

        transport = SseTransport("abc", "/message", flaky)
        transport.start()
        stream = transport.event_stream()
        await next_event(stream)

        await transport.handle_post_message(request_body(1))
        await transport.handle_post_message(request_body(2))

        first = json.loads((await next_event(stream))["data"])
        second = json.loads((await next_event(stream))["data"])
        assert first["error"]["code"] == INTERNAL_ERROR
        assert second == {"jsonrpc": "2.0", "id": 2, "result": {}}
        await stream.aclose()

    async def test_invalid_json_rejected(self) -> None:
        transport = SseTransport("abc", "/message", echo_handler)
        with pytest.raises(InvalidRequestError):
            await transport.handle_post_message(b"nope")

    async def test_non_jsonrpc_payload_rejected(self) -> None:
        transport = SseTransport("abc", "/message", echo_handler)
        with pytest.raises(InvalidRequestError):
            await transport.handle_post_message(b'{"hello": "world"}')

    async def test_post_after_close_is_not_found(self) -> None:
        transport = SseTransport("abc", "/message", echo_handler)
        transport.close()

        with pytest.raises(SessionNotFoundError):
            await transport.handle_post_message(request_body(1))

    def test_send_after_close_is_dropped(self) -> None:
        transport = SseTransport("abc", "/message", echo_handler)
        transport.close()

        assert transport.send(make_result(1, {})) is False

    def test_close_is_idempotent_and_runs_callbacks_once(self) -> None:
        transport = SseTransport("abc", "/message", echo_handler)
        closed: list[str] = []
        transport.on_close(lambda t: closed.append(t.session_id))

        transport.close()
        transport.close()

        assert closed == ["abc"]
        assert transport.state is SessionState.CLOSED

    def test_failing_close_callback_does_not_block_others(self) -> None:
        transport = SseTransport("abc", "/message", echo_handler)
        seen: list[str] = []

        def broken(_: SseTransport) -> None:
            raise RuntimeError("callback failed")

        transport.on_close(broken)
        transport.on_close(lambda t: seen.append(t.session_id))

        transport.close()

        assert seen == ["abc"]

    async def test_stream_ends_on_close(self) -> None:
        transport = SseTransport("abc", "/message", echo_handler)
        stream = transport.event_stream()
        await next_event(stream)

        transport.close()

        with pytest.raises(StopAsyncIteration):
            await next_event(stream)

    async def test_client_disconnect_closes_transport(self) -> None:
        """Abandoning the stream closes the session."""
        transport = SseTransport("abc", "/message", echo_handler)
        transport.start()
        stream = transport.event_stream()
        await next_event(stream)

        await stream.aclose()

        assert not transport.is_open
