"""Dispatches validated JSON-RPC messages to the MCP method handlers."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from gdrive_mcp.auth.errors import AuthMissingError
from gdrive_mcp.auth.provider import CredentialProvider
from gdrive_mcp.drive.errors import UpstreamError
from gdrive_mcp.observability.logging import get_logger
from gdrive_mcp.observability.metrics import RPC_REQUESTS, TOOL_CALLS, TOOL_LATENCY
from gdrive_mcp.protocol.models import (
    AUTH_REQUIRED,
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    REQUEST_TIMEOUT,
    SERVER_NAME,
    SERVER_VERSION,
    UPSTREAM_ERROR,
    CallToolParams,
    InitializeParams,
    JSONRPCMessage,
    ListResourcesParams,
    ReadResourceParams,
    make_error,
    make_result,
    negotiate_protocol_version,
)
from gdrive_mcp.resources.adapter import URI_SCHEME, InvalidResourceUriError, ResourceAdapter
from gdrive_mcp.tools.registry import ToolNotFoundError, ToolRegistry

logger = get_logger(__name__)

MethodHandler = Callable[[dict[str, Any]], Awaitable[dict[str, Any]]]

RESOURCE_CAPABILITIES: dict[str, Any] = {
    "schemes": [URI_SCHEME],
    "listable": True,
    "readable": True,
}


class ProtocolEngine:
    """MCP server semantics shared by every session.

    The engine is stateless per session; each transport feeds it messages one
    at a time and sends back whatever it returns.
    """

    def __init__(
        self,
        tools: ToolRegistry,
        resources: ResourceAdapter,
        credentials: CredentialProvider,
        request_timeout_seconds: float | None = 120.0,
    ) -> None:
        self._tools = tools
        self._resources = resources
        self._credentials = credentials
        self._timeout = request_timeout_seconds
        self._methods: dict[str, MethodHandler] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "resources/list": self._list_resources,
            "resources/read": self._read_resource,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    @property
    def methods(self) -> list[str]:
        return list(self._methods)

    async def handle(self, message: JSONRPCMessage) -> dict[str, Any] | None:
        """Process one inbound message.

        Returns:
            The JSON-RPC response to send, or None for notifications and
            client responses
        """
        if message.is_response:
            logger.debug("client_response_ignored", message_id=message.id)
            return None

        method = message.method or ""
        if message.is_notification:
            logger.debug("notification_received", method=method)
            return None

        if message.id is None:
            return None
        handler = self._methods.get(method)
        if handler is None:
            RPC_REQUESTS.labels(method="unknown", outcome="method_not_found").inc()
            return make_error(message.id, METHOD_NOT_FOUND, f"Method not found: {method}")

        params = message.params or {}
        try:
            result = await asyncio.wait_for(handler(params), timeout=self._timeout)
        except TimeoutError:
            return self._fail(message.id, method, REQUEST_TIMEOUT, "Request timed out")
        except ValidationError as e:
            return self._fail(
                message.id,
                method,
                INVALID_PARAMS,
                "Invalid params",
                e.errors(include_url=False, include_context=False),
            )
        except AuthMissingError as e:
            return self._fail(message.id, method, AUTH_REQUIRED, f"Authentication required: {e}")
        except ToolNotFoundError as e:
            return self._fail(message.id, method, INVALID_PARAMS, str(e))
        except InvalidResourceUriError as e:
            return self._fail(message.id, method, INVALID_PARAMS, str(e))
        except UpstreamError as e:
            return self._fail(message.id, method, UPSTREAM_ERROR, e.message)
        except Exception:
            logger.exception("rpc_method_failed", method=method, message_id=message.id)
            return self._fail(message.id, method, INTERNAL_ERROR, "Internal error")

        RPC_REQUESTS.labels(method=method, outcome="success").inc()
        return make_result(message.id, result)

    def _fail(
        self,
        request_id: Any,
        method: str,
        code: int,
        text: str,
        data: Any = None,
    ) -> dict[str, Any]:
        RPC_REQUESTS.labels(method=method, outcome="error").inc()
        logger.info(
            "rpc_request_failed", method=method, message_id=request_id, code=code, error=text
        )
        return make_error(request_id, code, text, data)

    async def _initialize(self, params: dict[str, Any]) -> dict[str, Any]:
        init = InitializeParams.model_validate(params)
        version = negotiate_protocol_version(init.protocol_version)
        logger.info(
            "mcp_session_initialized",
            protocol_version=version,
            client=init.client_info.get("name"),
        )
        return {
            "protocolVersion": version,
            "capabilities": {"resources": dict(RESOURCE_CAPABILITIES), "tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
        }

    async def _ping(self, _params: dict[str, Any]) -> dict[str, Any]:
        return {}

    async def _list_resources(self, params: dict[str, Any]) -> dict[str, Any]:
        args = ListResourcesParams.model_validate(params)
        await self._credentials.load_quietly()
        return await self._resources.list_resources(args.cursor)

    async def _read_resource(self, params: dict[str, Any]) -> dict[str, Any]:
        args = ReadResourceParams.model_validate(params)
        await self._credentials.load_quietly()
        return await self._resources.read_resource(args.uri)

    async def _list_tools(self, _params: dict[str, Any]) -> dict[str, Any]:
        return {"tools": [tool.to_listing() for tool in self._tools]}

    async def _call_tool(self, params: dict[str, Any]) -> dict[str, Any]:
        args = CallToolParams.model_validate(params)
        tool = self._tools.get(args.name)

        await self._credentials.get_valid_credentials()

        started = time.perf_counter()
        outcome = "error"
        try:
            response = await tool.handler(args.arguments or {})
            outcome = "is_error" if response.is_error else "success"
        finally:
            TOOL_CALLS.labels(tool=tool.name, outcome=outcome).inc()
            TOOL_LATENCY.labels(tool=tool.name).observe(time.perf_counter() - started)

        logger.info("tool_called", tool=tool.name, is_error=response.is_error)
        return response.to_envelope()
