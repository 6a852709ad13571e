"""JSON-RPC 2.0 and MCP payload models.

Inbound messages are validated into JSONRPCMessage; responses are built with
the helpers at the bottom of the module and sent as plain dicts.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

JSONRPC_VERSION = "2.0"

SUPPORTED_PROTOCOL_VERSIONS = ("2025-06-18", "2025-03-26", "2024-11-05")
SERVER_NAME = "example-servers/gdrive"
SERVER_VERSION = "0.2.0"

# Standard JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Server specific error codes
AUTH_REQUIRED = -32001
UPSTREAM_ERROR = -32002
REQUEST_TIMEOUT = -32003

RequestId = str | int


class JSONRPCMessage(BaseModel):
    """Any inbound JSON-RPC message: request, notification or response.

    Extra top-level keys (such as a body-carried ``sessionId``) are ignored.
    """

    model_config = ConfigDict(extra="allow")

    jsonrpc: Literal["2.0"]
    id: RequestId | None = None
    method: str | None = None
    params: dict[str, Any] | None = None
    result: Any = None
    error: dict[str, Any] | None = None

    @model_validator(mode="after")
    def check_shape(self) -> "JSONRPCMessage":
        """A message is either a method call or a response, never neither."""
        if self.method is None and self.id is None:
            raise ValueError("message must carry a method or an id")
        return self

    @property
    def is_notification(self) -> bool:
        return self.method is not None and self.id is None

    @property
    def is_response(self) -> bool:
        return self.method is None


class InitializeParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    protocol_version: str | None = Field(default=None, alias="protocolVersion")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    client_info: dict[str, Any] = Field(default_factory=dict, alias="clientInfo")


class ListResourcesParams(BaseModel):
    model_config = ConfigDict(extra="allow")

    cursor: str | None = None


class ReadResourceParams(BaseModel):
    model_config = ConfigDict(extra="allow")

    uri: str


class CallToolParams(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    arguments: dict[str, Any] | None = None


def negotiate_protocol_version(requested: str | None) -> str:
    """Echo a supported client version, otherwise offer the latest."""
    if requested in SUPPORTED_PROTOCOL_VERSIONS:
        return requested  # type: ignore[return-value]
    return SUPPORTED_PROTOCOL_VERSIONS[0]


def make_result(request_id: RequestId, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def make_error(
    request_id: RequestId | None,
    code: int,
    message: str,
    data: Any = None,
) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}
