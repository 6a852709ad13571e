"""File persistence for the credential record."""

import json
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from gdrive_mcp.auth.credentials import Credentials
from gdrive_mcp.auth.errors import CredentialStoreError
from gdrive_mcp.observability.logging import get_logger

logger = get_logger(__name__)


class CredentialStore:
    """Reads and atomically rewrites a JSON credential file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Credentials | None:
        """Load the stored credential.

        Returns:
            The credential, or None when no file exists

        Raises:
            CredentialStoreError: If the file exists but cannot be parsed
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CredentialStoreError(f"Cannot read {self._path}: {e}") from e

        try:
            return Credentials.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            raise CredentialStoreError(f"Invalid credential file {self._path}: {e}") from e

    def save(self, credentials: Credentials) -> None:
        """Write the credential, replacing the old file in one step."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = credentials.model_dump_json(exclude_none=True, indent=2)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", dir=self._path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self._path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise CredentialStoreError(f"Cannot write {self._path}: {e}") from e

        logger.debug("credentials_saved", path=str(self._path))
