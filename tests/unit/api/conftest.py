"""Fixtures for HTTP surface tests."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from gdrive_mcp.api.app import create_app
from gdrive_mcp.auth.provider import CredentialProvider
from gdrive_mcp.bootstrap import ServerComponents
from gdrive_mcp.config.models.api import APIConfig
from gdrive_mcp.config.models.auth import AuthConfig
from gdrive_mcp.config.settings import Settings
from tests.factories import FakeDriveClient, build_test_components




@pytest.fixture
def make_settings(credentials_path: Path) -> Callable[..., Settings]:
    """Factory for settings with API overrides."""

    def _make(**api: Any) -> Settings:
        return Settings(
            api=APIConfig(**api),
            auth=AuthConfig(
                credentials_path=credentials_path,
                oauth_keys_path=credentials_path.with_name("missing-keys.json"),
            ),
        )

    return _make


@pytest.fixture
def make_client(
    make_settings: Callable[..., Settings],
    fake_drive: FakeDriveClient,
    credential_provider: CredentialProvider,
) -> Callable[..., tuple[TestClient, ServerComponents]]:
    """Factory for a test client over a freshly built app."""

    def _make(**api: Any) -> tuple[TestClient, ServerComponents]:
        components = build_test_components(make_settings(**api), fake_drive, credential_provider)
        app: FastAPI = create_app(components=components)
        return TestClient(app, raise_server_exceptions=False), components

    return _make


@pytest.fixture
def client_and_components(
    make_client: Callable[..., tuple[TestClient, ServerComponents]],
) -> tuple[TestClient, ServerComponents]:
    return make_client()


@pytest.fixture
def client(client_and_components: tuple[TestClient, ServerComponents]) -> TestClient:
    return client_and_components[0]


@pytest.fixture
def components(client_and_components: tuple[TestClient, ServerComponents]) -> ServerComponents:
    return client_and_components[1]
