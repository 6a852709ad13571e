"""Errors raised by the Google API client."""


class UpstreamError(Exception):
    """A Google Drive or Sheets API call failed.

    Attributes:
        status_code: HTTP status returned by Google, None for transport failures
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_auth_error(self) -> bool:
        return self.status_code in (401, 403)
