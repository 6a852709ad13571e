"""Tests for credential and OAuth client models."""

import pytest
from pydantic import ValidationError

from gdrive_mcp.auth.credentials import Credentials, OAuthClient
from gdrive_mcp.auth.errors import OAuthClientConfigError

DEFAULT_URI = "https://oauth2.googleapis.com/token"


class TestCredentials:
    """Tests for Credentials."""

    def test_missing_access_token_counts_as_expired(self) -> None:
        assert Credentials(refresh_token="r").expires_within(0) is True

    def test_no_expiry_is_trusted(self) -> None:
        assert Credentials(access_token="a").is_valid() is True

    def test_expires_within_margin(self) -> None:
        creds = Credentials(access_token="a", expiry_date=1_000_000)
        assert creds.expires_within(300, now=1_000_000 - 200_000) is True
        assert creds.expires_within(300, now=1_000_000 - 400_000) is False

    def test_is_valid_at_expiry_boundary(self) -> None:
        creds = Credentials(access_token="a", expiry_date=5_000)
        assert creds.is_valid(now=4_999) is True
        assert creds.is_valid(now=5_000) is False

    def test_can_refresh(self) -> None:
        assert Credentials(refresh_token="r").can_refresh is True
        assert Credentials(access_token="a").can_refresh is False

    def test_refreshed_keeps_refresh_token_when_not_rotated(self) -> None:
        creds = Credentials(access_token="old", refresh_token="r", expiry_date=0)

        new = creds.refreshed({"access_token": "new", "expires_in": 3600}, now=1_000)

        assert new.access_token == "new"
        assert new.refresh_token == "r"
        assert new.expiry_date == 1_000 + 3_600_000
        assert creds.access_token == "old"

    def test_refreshed_takes_rotated_refresh_token(self) -> None:
        creds = Credentials(access_token="old", refresh_token="r1")
        new = creds.refreshed({"access_token": "new", "refresh_token": "r2"})
        assert new.refresh_token == "r2"

    def test_credentials_are_immutable(self) -> None:
        creds = Credentials(access_token="a")
        with pytest.raises(ValidationError):
            creds.access_token = "b"  # type: ignore[misc]

    def test_unknown_fields_ignored(self) -> None:
        """Records written by other OAuth libraries load cleanly."""
        creds = Credentials.model_validate({"access_token": "a", "id_token": "x"})
        assert creds.access_token == "a"


class TestOAuthClient:
    """Tests for parsing OAuth client keys files."""

    def test_installed_shape(self) -> None:
        data = {"installed": {"client_id": "id", "client_secret": "secret"}}
        client = OAuthClient.from_keys_file(data, DEFAULT_URI)
        assert client.client_id == "id"
        assert client.token_uri == DEFAULT_URI

    def test_web_shape_with_token_uri(self) -> None:
        data = {
            "web": {
                "client_id": "id",
                "client_secret": "secret",
                "token_uri": "https://custom.test/token",
            }
        }
        client = OAuthClient.from_keys_file(data, DEFAULT_URI)
        assert client.token_uri == "https://custom.test/token"

    def test_flat_shape(self) -> None:
        client = OAuthClient.from_keys_file({"client_id": "id", "client_secret": "s"}, DEFAULT_URI)
        assert client.client_secret == "s"

    def test_missing_secret_raises(self) -> None:
        with pytest.raises(OAuthClientConfigError):
            OAuthClient.from_keys_file({"installed": {"client_id": "id"}}, DEFAULT_URI)
