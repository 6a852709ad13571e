"""Google Drive and Sheets API access."""

from gdrive_mcp.drive.client import DriveClient
from gdrive_mcp.drive.errors import UpstreamError
from gdrive_mcp.drive.models import DriveFile, FileListPage

__all__ = ["DriveClient", "DriveFile", "FileListPage", "UpstreamError"]
