"""Tool descriptors and the response shapes tool handlers produce."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class TextContent(BaseModel):
    """One text item in a tool result."""

    type: Literal["text"] = "text"
    text: str


class RawContent(BaseModel):
    """Undecorated file content, either text or base64 blob."""

    model_config = ConfigDict(populate_by_name=True)

    mime_type: str = Field(alias="mimeType")
    text: str | None = None
    blob: str | None = None

    @model_validator(mode="after")
    def check_payload(self) -> "RawContent":
        if (self.text is None) == (self.blob is None):
            raise ValueError("exactly one of text or blob must be set")
        return self

    def to_resource_contents(self, uri: str) -> dict[str, Any]:
        contents: dict[str, Any] = {"uri": uri, "mimeType": self.mime_type}
        if self.text is not None:
            contents["text"] = self.text
        else:
            contents["blob"] = self.blob
        return contents


class ToolResponse(BaseModel):
    """Result of one tool invocation.

    `resource` carries the raw content for tools whose output doubles as a
    resource read. It is never sent to tool callers.
    """

    content: list[TextContent] = Field(default_factory=list)
    is_error: bool = False
    resource: RawContent | None = None

    @classmethod
    def text(cls, text: str, resource: RawContent | None = None) -> "ToolResponse":
        return cls(content=[TextContent(text=text)], resource=resource)

    @classmethod
    def error(cls, message: str) -> "ToolResponse":
        return cls(content=[TextContent(text=message)], is_error=True)

    def to_envelope(self) -> dict[str, Any]:
        """Render as a tools/call result."""
        return {
            "_meta": {},
            "content": [item.model_dump() for item in self.content],
            "isError": self.is_error,
        }


ToolHandler = Callable[[dict[str, Any]], Awaitable[ToolResponse]]


@dataclass(frozen=True)
class ToolDescriptor:
    """A named, schema-described operation exposed through tools/call."""

    name: str
    description: str
    input_schema: dict[str, Any]
    handler: ToolHandler = field(compare=False, repr=False)

    def to_listing(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


def input_schema_for(model: type[BaseModel]) -> dict[str, Any]:
    """JSON schema of an argument model as advertised in tools/list."""
    schema = model.model_json_schema(by_alias=True)
    schema.pop("title", None)
    for prop in schema.get("properties", {}).values():
        prop.pop("title", None)
    return schema
