"""Shared test fixtures for the mcp-gdrive test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from gdrive_mcp.auth.credentials import Credentials, OAuthClient, now_ms
from gdrive_mcp.auth.provider import CredentialProvider
from gdrive_mcp.auth.store import CredentialStore
from gdrive_mcp.drive.models import DriveFile
from tests.factories.drive import FakeDriveClient, make_files

TOKEN_URI = "https://oauth2.example.test/token"


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "[api]\\nport = 4000",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            toml_file = test_config_dir / filename
            toml_file.write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            original = self.original_env[key]
            if original is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = original


@pytest.fixture
def env_override() -> Generator[Callable[[dict[str, str]], EnvOverrideContext], None, None]:
    """Context manager for temporarily setting environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"MCP_API__PORT": "4000"}):
                # test code here
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    yield _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache and TOML source before and after each test."""
    from gdrive_mcp.config import get_settings
    from gdrive_mcp.config.settings import set_toml_config

    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})


# --- Credentials --------------------------------------------------------------


@pytest.fixture
def oauth_client() -> OAuthClient:
    return OAuthClient(client_id="client-id", client_secret="client-secret", token_uri=TOKEN_URI)


@pytest.fixture
def valid_credentials() -> Credentials:
    """Credential valid for the next hour."""
    return Credentials(
        access_token="ya29.valid-token",
        refresh_token="refresh-token",
        expiry_date=now_ms() + 3600 * 1000,
    )


@pytest.fixture
def expired_credentials() -> Credentials:
    return Credentials(
        access_token="ya29.expired-token",
        refresh_token="refresh-token",
        expiry_date=now_ms() - 1000,
    )


@pytest.fixture
def credentials_path(tmp_path: Path) -> Path:
    return tmp_path / "credentials.json"


@pytest.fixture
def credential_store(credentials_path: Path) -> CredentialStore:
    return CredentialStore(credentials_path)


@pytest.fixture
def stored_credentials(
    credential_store: CredentialStore, valid_credentials: Credentials
) -> Credentials:
    """Write a valid credential to the store."""
    credential_store.save(valid_credentials)
    return valid_credentials


@pytest.fixture
def credential_provider(
    credential_store: CredentialStore, oauth_client: OAuthClient
) -> CredentialProvider:
    return CredentialProvider(credential_store, oauth_client)


# --- Drive --------------------------------------------------------------------


@pytest.fixture
def drive_files() -> list[DriveFile]:
    """Fifteen plain text files."""
    return make_files(15)


@pytest.fixture
def fake_drive(drive_files: list[DriveFile]) -> FakeDriveClient:
    contents = {f.id: f"content of {f.name}".encode() for f in drive_files}
    return FakeDriveClient(drive_files, contents)
