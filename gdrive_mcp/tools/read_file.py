"""gdrive_read_file: fetch a file's content.

Google Workspace files are exported to a portable format; everything else is
downloaded as stored.
"""

import base64
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gdrive_mcp.drive.client import DriveClient
from gdrive_mcp.drive.errors import UpstreamError
from gdrive_mcp.drive.models import (
    GOOGLE_DOCUMENT,
    GOOGLE_DRAWING,
    GOOGLE_PRESENTATION,
    GOOGLE_SPREADSHEET,
    DriveFile,
)
from gdrive_mcp.observability.logging import get_logger
from gdrive_mcp.tools.base import RawContent, ToolDescriptor, ToolResponse, input_schema_for

logger = get_logger(__name__)

NAME = "gdrive_read_file"

EXPORT_FORMATS: dict[str, str] = {
    GOOGLE_DOCUMENT: "text/markdown",
    GOOGLE_SPREADSHEET: "text/csv",
    GOOGLE_PRESENTATION: "text/plain",
    GOOGLE_DRAWING: "image/png",
}
DEFAULT_EXPORT_FORMAT = "text/plain"


class ReadFileArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_id: str = Field(alias="fileId", min_length=1, description="ID of the file to read")


def is_text_mime_type(mime_type: str) -> bool:
    return mime_type.startswith("text/") or mime_type == "application/json"


def to_raw_content(mime_type: str, data: bytes) -> RawContent:
    if is_text_mime_type(mime_type):
        return RawContent(mime_type=mime_type, text=data.decode("utf-8", errors="replace"))
    return RawContent(mime_type=mime_type, blob=base64.b64encode(data).decode("ascii"))


async def read_file_content(drive: DriveClient, file_id: str) -> tuple[DriveFile, RawContent]:
    """Fetch metadata and content for one file."""
    file = await drive.get_file(file_id)

    if file.is_google_workspace:
        export_mime = EXPORT_FORMATS.get(file.mime_type, DEFAULT_EXPORT_FORMAT)
        data = await drive.export_file(file_id, export_mime)
        return file, to_raw_content(export_mime, data)

    data = await drive.download_file(file_id)
    return file, to_raw_content(file.mime_type, data)


def build_read_file_tool(drive: DriveClient) -> ToolDescriptor:
    async def handler(arguments: dict[str, Any]) -> ToolResponse:
        args = ReadFileArguments.model_validate(arguments)
        try:
            file, raw = await read_file_content(drive, args.file_id)
        except UpstreamError as e:
            logger.warning("drive_read_failed", file_id=args.file_id, error=e.message)
            return ToolResponse.error(f"Error reading file {args.file_id}: {e.message}")

        body = raw.text if raw.text is not None else raw.blob
        return ToolResponse.text(f"Contents of {file.name}:\n\n{body}", resource=raw)

    return ToolDescriptor(
        name=NAME,
        description="Read contents of a file from Google Drive",
        input_schema=input_schema_for(ReadFileArguments),
        handler=handler,
    )
