"""Google Sheets tools: gsheets_read and gsheets_update_cell."""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from gdrive_mcp.drive.client import DriveClient
from gdrive_mcp.drive.errors import UpstreamError
from gdrive_mcp.observability.logging import get_logger
from gdrive_mcp.tools.base import ToolDescriptor, ToolResponse, input_schema_for

logger = get_logger(__name__)

READ_NAME = "gsheets_read"
UPDATE_NAME = "gsheets_update_cell"


class SheetsReadArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    spreadsheet_id: str = Field(
        alias="spreadsheetId", min_length=1, description="The ID of the spreadsheet to read"
    )
    ranges: list[str] | None = Field(
        default=None,
        description="Optional list of A1 notation ranges like ['Sheet1!A1:B10']. "
        "If not provided, reads entire sheet.",
    )
    sheet_id: int | None = Field(
        default=None,
        alias="sheetId",
        description="Optional specific sheet ID to read. If not provided with ranges, "
        "reads first sheet.",
    )


class UpdateCellArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_id: str = Field(alias="fileId", min_length=1, description="ID of the spreadsheet")
    range: str = Field(min_length=1, description="Cell range in A1 notation (e.g. 'Sheet1!A1')")
    value: str = Field(description="New cell value")


class SheetNotFoundError(LookupError):
    pass


def quote_sheet_title(title: str) -> str:
    """A1 range selecting a whole sheet by title."""
    return "'" + title.replace("'", "''") + "'"


async def resolve_ranges(drive: DriveClient, args: SheetsReadArguments) -> list[str]:
    if args.ranges:
        return args.ranges

    metadata = await drive.get_spreadsheet(args.spreadsheet_id)
    sheets = [s.get("properties", {}) for s in metadata.get("sheets", [])]

    if args.sheet_id is not None:
        for props in sheets:
            if props.get("sheetId") == args.sheet_id:
                return [quote_sheet_title(props.get("title", ""))]
        raise SheetNotFoundError(f"Sheet ID {args.sheet_id} not found")

    return [quote_sheet_title(props.get("title", "")) for props in sheets]


def build_sheets_read_tool(drive: DriveClient) -> ToolDescriptor:
    async def handler(arguments: dict[str, Any]) -> ToolResponse:
        args = SheetsReadArguments.model_validate(arguments)
        try:
            ranges = await resolve_ranges(drive, args)
            value_ranges = await drive.batch_get_values(args.spreadsheet_id, ranges)
        except SheetNotFoundError as e:
            return ToolResponse.error(str(e))
        except UpstreamError as e:
            logger.warning(
                "sheets_read_failed", spreadsheet_id=args.spreadsheet_id, error=e.message
            )
            return ToolResponse.error(f"Error reading spreadsheet: {e.message}")

        result = {
            "spreadsheetId": args.spreadsheet_id,
            "valueRanges": [
                {"range": vr.get("range"), "values": vr.get("values", [])}
                for vr in value_ranges
            ],
        }
        return ToolResponse.text(json.dumps(result, indent=2))

    return ToolDescriptor(
        name=READ_NAME,
        description="Read data from a Google Spreadsheet with flexible options for "
        "ranges and formatting",
        input_schema=input_schema_for(SheetsReadArguments),
        handler=handler,
    )


def build_update_cell_tool(drive: DriveClient) -> ToolDescriptor:
    async def handler(arguments: dict[str, Any]) -> ToolResponse:
        args = UpdateCellArguments.model_validate(arguments)
        try:
            await drive.update_values(args.file_id, args.range, [[args.value]])
        except UpstreamError as e:
            logger.warning("sheets_update_failed", spreadsheet_id=args.file_id, error=e.message)
            return ToolResponse.error(f"Error updating cell {args.range}: {e.message}")

        logger.info("sheet_cell_updated", spreadsheet_id=args.file_id, range=args.range)
        return ToolResponse.text(f"Updated cell {args.range} to value: {args.value}")

    return ToolDescriptor(
        name=UPDATE_NAME,
        description="Update a cell value in a Google Spreadsheet",
        input_schema=input_schema_for(UpdateCellArguments),
        handler=handler,
    )
