"""Exposes Drive files as MCP resources addressed by gdrive:/// URIs."""

from typing import Any

from gdrive_mcp.drive.client import DriveClient
from gdrive_mcp.drive.errors import UpstreamError
from gdrive_mcp.observability.logging import get_logger
from gdrive_mcp.tools.read_file import NAME as READ_FILE_TOOL
from gdrive_mcp.tools.registry import ToolRegistry

logger = get_logger(__name__)

URI_SCHEME = "gdrive"
URI_PREFIX = f"{URI_SCHEME}:///"
LIST_FIELDS = "nextPageToken, files(id, name, mimeType)"


class InvalidResourceUriError(ValueError):
    pass


def resource_uri(file_id: str) -> str:
    return f"{URI_PREFIX}{file_id}"


def parse_resource_uri(uri: str) -> str:
    """Return the file id carried by a gdrive:/// URI.

    Raises:
        InvalidResourceUriError: If the URI has another scheme or no id
    """
    if not uri.startswith(URI_PREFIX):
        raise InvalidResourceUriError(f"Unsupported resource URI: {uri}")
    file_id = uri[len(URI_PREFIX) :]
    if not file_id or "/" in file_id:
        raise InvalidResourceUriError(f"Invalid resource URI: {uri}")
    return file_id


class ResourceAdapter:
    """Lists Drive files page by page and reads them via the read-file tool."""

    def __init__(
        self,
        drive: DriveClient,
        tools: ToolRegistry,
        page_size: int = 10,
        read_tool_name: str = READ_FILE_TOOL,
    ) -> None:
        self._drive = drive
        self._tools = tools
        self._page_size = page_size
        self._read_tool_name = read_tool_name

    async def list_resources(self, cursor: str | None = None) -> dict[str, Any]:
        """One page of resources; `nextCursor` only when more remain.

        Raises:
            UpstreamError: If Drive rejects the listing
        """
        page = await self._drive.list_files(
            page_size=self._page_size,
            page_token=cursor or None,
            fields=LIST_FIELDS,
        )
        result: dict[str, Any] = {
            "resources": [
                {"uri": resource_uri(f.id), "mimeType": f.mime_type, "name": f.name}
                for f in page.files
            ]
        }
        if page.next_page_token:
            result["nextCursor"] = page.next_page_token
        return result

    async def read_resource(self, uri: str) -> dict[str, Any]:
        """Read one resource through the read-file tool's raw content.

        Raises:
            InvalidResourceUriError: If the URI is not a gdrive:/// URI
            UpstreamError: If the file could not be read
        """
        file_id = parse_resource_uri(uri)
        tool = self._tools.get(self._read_tool_name)
        response = await tool.handler({"fileId": file_id})

        if response.is_error or response.resource is None:
            message = response.content[0].text if response.content else "Read failed"
            logger.warning("resource_read_failed", uri=uri, error=message)
            raise UpstreamError(message)

        return {"contents": [response.resource.to_resource_contents(uri)]}
