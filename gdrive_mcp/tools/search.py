"""gdrive_search: find files by name."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gdrive_mcp.drive.client import FILE_LIST_FIELDS, DriveClient
from gdrive_mcp.drive.errors import UpstreamError
from gdrive_mcp.drive.models import GOOGLE_SPREADSHEET
from gdrive_mcp.observability.logging import get_logger
from gdrive_mcp.tools.base import ToolDescriptor, ToolResponse, input_schema_for

logger = get_logger(__name__)

NAME = "gdrive_search"
DEFAULT_PAGE_SIZE = 10


class SearchArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(description="Search query")
    page_token: str | None = Field(
        default=None,
        alias="pageToken",
        description="Token for the next page of results",
    )
    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        alias="pageSize",
        ge=1,
        le=100,
        description="Number of results per page (max 100)",
    )


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def build_search_query(user_query: str) -> str:
    """Translate free text into a Drive `q` expression."""
    text = user_query.strip()
    if not text:
        return "trashed = false"

    conditions = [f"name contains '{_escape(text)}'"]
    if "sheet" in text.lower():
        conditions.append(f"mimeType = '{GOOGLE_SPREADSHEET}'")
    return f"({' or '.join(conditions)}) and trashed = false"


def build_search_tool(drive: DriveClient) -> ToolDescriptor:
    async def handler(arguments: dict[str, Any]) -> ToolResponse:
        args = SearchArguments.model_validate(arguments)
        try:
            page = await drive.list_files(
                page_size=args.page_size,
                page_token=args.page_token,
                query=build_search_query(args.query),
                order_by="modifiedTime desc",
                fields=FILE_LIST_FIELDS,
            )
        except UpstreamError as e:
            logger.warning("drive_search_failed", error=e.message)
            return ToolResponse.error(f"Error searching files: {e.message}")

        lines = [f"{f.id} {f.name} ({f.mime_type})" for f in page.files]
        text = f"Found {len(page.files)} files:\n" + "\n".join(lines)
        if page.next_page_token:
            text += f"\n\nMore results available. Use pageToken: {page.next_page_token}"
        return ToolResponse.text(text)

    return ToolDescriptor(
        name=NAME,
        description="Search for files in Google Drive",
        input_schema=input_schema_for(SearchArguments),
        handler=handler,
    )
