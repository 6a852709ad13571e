"""Name-keyed collection of tools."""

from collections.abc import Iterator

from gdrive_mcp.observability.logging import get_logger
from gdrive_mcp.tools.base import ToolDescriptor

logger = get_logger(__name__)


class ToolNotFoundError(LookupError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}")


class DuplicateToolError(ValueError):
    pass


class ToolRegistry:
    """Ordered mapping of tool name to descriptor.

    Listing order is registration order; lookups are exact name matches.
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}

    def register(self, tool: ToolDescriptor) -> None:
        if tool.name in self._tools:
            raise DuplicateToolError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool
        logger.debug("tool_registered", tool=tool.name)

    def get(self, name: str) -> ToolDescriptor:
        """Return the tool with this exact name.

        Raises:
            ToolNotFoundError: If no tool has that name
        """
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def list(self) -> list[ToolDescriptor]:
        return list(self._tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._tools.values())
