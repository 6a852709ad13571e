"""Async client for the Google Drive v3 and Sheets v4 REST APIs."""

from collections.abc import Callable
from typing import Any
from urllib.parse import quote

import httpx

from gdrive_mcp.config.models.drive import DRIVE_API_URL, SHEETS_API_URL
from gdrive_mcp.drive.errors import UpstreamError
from gdrive_mcp.drive.models import DriveFile, FileListPage
from gdrive_mcp.observability.logging import get_logger
from gdrive_mcp.observability.metrics import UPSTREAM_ERRORS

logger = get_logger(__name__)

TokenSource = Callable[[], str | None]

FILE_FIELDS = "id, name, mimeType, modifiedTime, size"
FILE_LIST_FIELDS = f"nextPageToken, files({FILE_FIELDS})"


def _path(value: str) -> str:
    return quote(value, safe="")


class DriveClient:
    """Thin async wrapper over the Drive and Sheets endpoints the tools need.

    Every request is authorized with whatever access token the token source
    returns at that moment; no retries are attempted.
    """

    def __init__(
        self,
        token_source: TokenSource,
        drive_api_url: str = DRIVE_API_URL,
        sheets_api_url: str = SHEETS_API_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize the client.

        Args:
            token_source: Returns the current access token (or None)
            drive_api_url: Drive v3 base URL
            sheets_api_url: Sheets v4 base URL
            http_client: Shared HTTP client (created lazily if omitted)
            timeout_seconds: Per-request timeout
        """
        self._token_source = token_source
        self._drive_url = drive_api_url.rstrip("/")
        self._sheets_url = sheets_api_url.rstrip("/")
        self._client = http_client
        self._timeout = timeout_seconds

    async def list_files(
        self,
        *,
        page_size: int,
        page_token: str | None = None,
        query: str | None = None,
        order_by: str | None = None,
        fields: str = FILE_LIST_FIELDS,
    ) -> FileListPage:
        """List one page of files visible to the account."""
        params: dict[str, Any] = {"pageSize": page_size, "fields": fields}
        if page_token:
            params["pageToken"] = page_token
        if query:
            params["q"] = query
        if order_by:
            params["orderBy"] = order_by

        response = await self._request("GET", f"{self._drive_url}/files", params=params)
        return FileListPage.model_validate(response.json())

    async def get_file(self, file_id: str) -> DriveFile:
        """Fetch metadata for one file."""
        response = await self._request(
            "GET",
            f"{self._drive_url}/files/{_path(file_id)}",
            params={"fields": FILE_FIELDS},
        )
        return DriveFile.model_validate(response.json())

    async def export_file(self, file_id: str, mime_type: str) -> bytes:
        """Export a Google Workspace document to the given format."""
        response = await self._request(
            "GET",
            f"{self._drive_url}/files/{_path(file_id)}/export",
            params={"mimeType": mime_type},
        )
        return response.content

    async def download_file(self, file_id: str) -> bytes:
        """Download the binary content of a regular file."""
        response = await self._request(
            "GET",
            f"{self._drive_url}/files/{_path(file_id)}",
            params={"alt": "media"},
        )
        return response.content

    async def get_spreadsheet(
        self, spreadsheet_id: str, fields: str = "sheets.properties"
    ) -> dict[str, Any]:
        response = await self._request(
            "GET",
            f"{self._sheets_url}/spreadsheets/{_path(spreadsheet_id)}",
            params={"fields": fields},
        )
        return response.json()

    async def batch_get_values(
        self, spreadsheet_id: str, ranges: list[str]
    ) -> list[dict[str, Any]]:
        """Read cell values for several A1 ranges."""
        response = await self._request(
            "GET",
            f"{self._sheets_url}/spreadsheets/{_path(spreadsheet_id)}/values:batchGet",
            params={"ranges": ranges},
        )
        value_ranges: list[dict[str, Any]] = response.json().get("valueRanges", [])
        return value_ranges

    async def update_values(
        self,
        spreadsheet_id: str,
        range_: str,
        values: list[list[Any]],
        value_input_option: str = "USER_ENTERED",
    ) -> dict[str, Any]:
        """Write values into an A1 range."""
        response = await self._request(
            "PUT",
            f"{self._sheets_url}/spreadsheets/{_path(spreadsheet_id)}/values/{_path(range_)}",
            params={"valueInputOption": value_input_option},
            json={"range": range_, "values": values},
        )
        return response.json()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        token = self._token_source()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        client = await self._ensure_client()
        try:
            response = await client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            UPSTREAM_ERRORS.labels(status="transport").inc()
            logger.warning("google_api_unreachable", method=method, url=url, error=str(e))
            raise UpstreamError(f"Google API request failed: {e}") from e

        if response.status_code >= 400:
            UPSTREAM_ERRORS.labels(status=str(response.status_code)).inc()
            message = _error_message(response)
            logger.warning(
                "google_api_error",
                method=method,
                url=url,
                status_code=response.status_code,
                message=message,
            )
            raise UpstreamError(
                f"Google API error {response.status_code}: {message}",
                status_code=response.status_code,
            )

        return response


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    error = payload.get("error") if isinstance(payload, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str):
        return payload.get("error_description") or error
    return response.reason_phrase
