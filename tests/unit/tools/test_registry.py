"""Tests for the tool registry and response envelope."""

from typing import Any

import pytest

from gdrive_mcp.tools import build_tool_registry
from gdrive_mcp.tools.base import RawContent, ToolDescriptor, ToolResponse
from gdrive_mcp.tools.registry import DuplicateToolError, ToolNotFoundError, ToolRegistry
from tests.factories.drive import FakeDriveClient


async def noop(arguments: dict[str, Any]) -> ToolResponse:
    return ToolResponse.text("ok")


def descriptor(name: str) -> ToolDescriptor:
    return ToolDescriptor(name=name, description=f"{name} tool", input_schema={}, handler=noop)


class TestToolRegistry:
    """Tests for ToolRegistry."""

    def test_lookup_is_exact(self) -> None:
        registry = ToolRegistry()
        registry.register(descriptor("gdrive_search"))

        assert registry.get("gdrive_search").name == "gdrive_search"
        with pytest.raises(ToolNotFoundError, match="Tool not found: GDRIVE_SEARCH"):
            registry.get("GDRIVE_SEARCH")

    def test_duplicate_name_rejected(self) -> None:
        registry = ToolRegistry()
        registry.register(descriptor("a"))
        with pytest.raises(DuplicateToolError):
            registry.register(descriptor("a"))

    def test_listing_keeps_registration_order(self) -> None:
        registry = ToolRegistry()
        for name in ("b", "a", "c"):
            registry.register(descriptor(name))

        assert [t.name for t in registry.list()] == ["b", "a", "c"]
        assert "a" in registry
        assert len(registry) == 3


class TestBuiltinTools:
    """Tests for the registered built-in tools."""

    def test_builtin_tool_names(self, fake_drive: FakeDriveClient) -> None:
        registry = build_tool_registry(fake_drive)  # type: ignore[arg-type]
        assert [t.name for t in registry] == [
            "gdrive_search",
            "gdrive_read_file",
            "gsheets_read",
            "gsheets_update_cell",
        ]

    def test_schemas_use_wire_names(self, fake_drive: FakeDriveClient) -> None:
        registry = build_tool_registry(fake_drive)  # type: ignore[arg-type]

        search = registry.get("gdrive_search").input_schema
        assert search["type"] == "object"
        assert set(search["properties"]) == {"query", "pageToken", "pageSize"}
        assert search["required"] == ["query"]

        read = registry.get("gdrive_read_file").input_schema
        assert read["required"] == ["fileId"]

        update = registry.get("gsheets_update_cell").input_schema
        assert set(update["required"]) == {"fileId", "range", "value"}


class TestToolResponse:
    """Tests for the external envelope."""

    def test_envelope_shape(self) -> None:
        response = ToolResponse.text("hello", resource=RawContent(mime_type="text/plain", text="x"))

        assert response.to_envelope() == {
            "_meta": {},
            "content": [{"type": "text", "text": "hello"}],
            "isError": False,
        }

    def test_error_envelope(self) -> None:
        assert ToolResponse.error("bad").to_envelope()["isError"] is True

    def test_raw_content_requires_one_payload(self) -> None:
        with pytest.raises(ValueError):
            RawContent(mime_type="text/plain")
        with pytest.raises(ValueError):
            RawContent(mime_type="text/plain", text="a", blob="b")
