"""Test doubles and factories for Drive models."""

from typing import Any

from gdrive_mcp.drive.errors import UpstreamError
from gdrive_mcp.drive.models import DriveFile, FileListPage


class FakeDriveClient:
    """In-memory stand-in for DriveClient.

    Page tokens are stringified offsets into the file list.
    """

    def __init__(self, files: list[DriveFile], contents: dict[str, bytes] | None = None) -> None:
        self.files = files
        self.contents = contents or {}
        self.list_calls: list[dict[str, Any]] = []
        self.exports: list[tuple[str, str]] = []
        self.updates: list[tuple[str, str, list[list[Any]]]] = []
        self.fail_with: UpstreamError | None = None

    async def list_files(
        self,
        *,
        page_size: int,
        page_token: str | None = None,
        query: str | None = None,
        order_by: str | None = None,
        fields: str | None = None,
    ) -> FileListPage:
        self.list_calls.append(
            {
                "page_size": page_size,
                "page_token": page_token,
                "query": query,
                "order_by": order_by,
            }
        )
        self._maybe_fail()
        start = int(page_token) if page_token else 0
        end = start + page_size
        next_token = str(end) if end < len(self.files) else None
        return FileListPage(files=self.files[start:end], next_page_token=next_token)

    async def get_file(self, file_id: str) -> DriveFile:
        self._maybe_fail()
        for file in self.files:
            if file.id == file_id:
                return file
        raise UpstreamError(f"Google API error 404: File not found: {file_id}", status_code=404)

    async def export_file(self, file_id: str, mime_type: str) -> bytes:
        self.exports.append((file_id, mime_type))
        return self.contents.get(file_id, b"")

    async def download_file(self, file_id: str) -> bytes:
        return self.contents.get(file_id, b"")

    async def get_spreadsheet(self, spreadsheet_id: str, fields: str = "") -> dict[str, Any]:
        self._maybe_fail()
        return {"sheets": [{"properties": {"sheetId": 0, "title": "Sheet1"}}]}

    async def batch_get_values(
        self, spreadsheet_id: str, ranges: list[str]
    ) -> list[dict[str, Any]]:
        self._maybe_fail()
        return [{"range": r, "values": [["a", "b"]]} for r in ranges]

    async def update_values(
        self,
        spreadsheet_id: str,
        range_: str,
        values: list[list[Any]],
        value_input_option: str = "",
    ) -> dict[str, Any]:
        self._maybe_fail()
        self.updates.append((spreadsheet_id, range_, values))
        return {"updatedCells": 1}

    async def aclose(self) -> None:
        pass

    def _maybe_fail(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with


def make_files(count: int) -> list[DriveFile]:
    return [
        DriveFile(id=f"file-{i}", name=f"Document {i}", mime_type="text/plain")
        for i in range(count)
    ]


