"""Google Drive and Sheets API configuration models."""

from pydantic import BaseModel, Field

DRIVE_API_URL = "https://www.googleapis.com/drive/v3"
SHEETS_API_URL = "https://sheets.googleapis.com/v4"


class DriveConfig(BaseModel):
    """Upstream API endpoints and paging."""

    page_size: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Files returned per resources/list page",
    )
    timeout_seconds: float = Field(default=30.0, gt=0, description="Per-request HTTP timeout")
    drive_api_url: str = Field(default=DRIVE_API_URL, description="Drive v3 base URL")
    sheets_api_url: str = Field(default=SHEETS_API_URL, description="Sheets v4 base URL")
