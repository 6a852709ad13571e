"""Tests for credential file persistence."""

import json
import stat
from pathlib import Path

import pytest

from gdrive_mcp.auth.credentials import Credentials
from gdrive_mcp.auth.errors import CredentialStoreError
from gdrive_mcp.auth.store import CredentialStore


class TestCredentialStore:
    """Tests for CredentialStore."""

    def test_load_missing_file_returns_none(self, credential_store: CredentialStore) -> None:
        assert credential_store.load() is None

    def test_save_then_load(
        self, credential_store: CredentialStore, valid_credentials: Credentials
    ) -> None:
        credential_store.save(valid_credentials)
        assert credential_store.load() == valid_credentials

    def test_file_is_owner_only(
        self, credential_store: CredentialStore, valid_credentials: Credentials
    ) -> None:
        credential_store.save(valid_credentials)
        mode = stat.S_IMODE(credential_store.path.stat().st_mode)
        assert mode == 0o600

    def test_save_replaces_without_leftovers(
        self, credential_store: CredentialStore, valid_credentials: Credentials
    ) -> None:
        """Rewrites leave exactly one file, fully written."""
        credential_store.save(valid_credentials)
        credential_store.save(valid_credentials.model_copy(update={"access_token": "second"}))

        files = list(credential_store.path.parent.iterdir())
        assert files == [credential_store.path]
        assert json.loads(credential_store.path.read_text())["access_token"] == "second"

    def test_save_creates_parent_directory(
        self, tmp_path: Path, valid_credentials: Credentials
    ) -> None:
        store = CredentialStore(tmp_path / "nested" / "dir" / "creds.json")
        store.save(valid_credentials)
        assert store.load() == valid_credentials

    def test_invalid_file_raises(self, credentials_path: Path) -> None:
        credentials_path.write_text("{not json")
        with pytest.raises(CredentialStoreError):
            CredentialStore(credentials_path).load()

    def test_reads_google_token_file_format(self, credentials_path: Path) -> None:
        """Accepts the record written by the interactive authorization step."""
        credentials_path.write_text(
            json.dumps(
                {
                    "access_token": "ya29.x",
                    "refresh_token": "1//r",
                    "scope": "https://www.googleapis.com/auth/drive.readonly",
                    "token_type": "Bearer",
                    "expiry_date": 1700000000000,
                }
            )
        )
        creds = CredentialStore(credentials_path).load()
        assert creds is not None
        assert creds.expiry_date == 1700000000000
