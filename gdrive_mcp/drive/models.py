"""Google Drive API response models."""

from pydantic import BaseModel, ConfigDict, Field

GOOGLE_APPS_PREFIX = "application/vnd.google-apps"
GOOGLE_DOCUMENT = "application/vnd.google-apps.document"
GOOGLE_SPREADSHEET = "application/vnd.google-apps.spreadsheet"
GOOGLE_PRESENTATION = "application/vnd.google-apps.presentation"
GOOGLE_DRAWING = "application/vnd.google-apps.drawing"


class DriveFile(BaseModel):
    """File metadata as returned by files.get / files.list."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    mime_type: str = Field(default="application/octet-stream", alias="mimeType")
    modified_time: str | None = Field(default=None, alias="modifiedTime")
    size: int | None = None

    @property
    def is_google_workspace(self) -> bool:
        return self.mime_type.startswith(GOOGLE_APPS_PREFIX)


class FileListPage(BaseModel):
    """One page of files.list."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    files: list[DriveFile] = Field(default_factory=list)
    next_page_token: str | None = Field(default=None, alias="nextPageToken")
