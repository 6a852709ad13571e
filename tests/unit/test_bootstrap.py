"""Tests for component wiring."""

from pathlib import Path

import pytest

from gdrive_mcp.bootstrap import StartupError, build_components
from gdrive_mcp.config.models.auth import AuthConfig
from gdrive_mcp.config.settings import Settings


def settings_with_keys(tmp_path: Path, keys: str | None) -> Settings:
    keys_path = tmp_path / "gcp-oauth.keys.json"
    if keys is not None:
        keys_path.write_text(keys)
    return Settings(
        auth=AuthConfig(
            credentials_path=tmp_path / "credentials.json",
            oauth_keys_path=keys_path,
        )
    )


class TestBuildComponents:
    def test_builds_without_oauth_keys(self, tmp_path: Path) -> None:
        components = build_components(settings_with_keys(tmp_path, None))

        assert [tool.name for tool in components.tools] == [
            "gdrive_search",
            "gdrive_read_file",
            "gsheets_read",
            "gsheets_update_cell",
        ]
        assert len(components.sessions) == 0
        assert components.engine.methods == [
            "initialize",
            "ping",
            "resources/list",
            "resources/read",
            "tools/list",
            "tools/call",
        ]

    def test_unreadable_keys_file_fails_startup(self, tmp_path: Path) -> None:
        with pytest.raises(StartupError):
            build_components(settings_with_keys(tmp_path, "not json"))

    async def test_aclose_releases_everything(self, tmp_path: Path) -> None:
        components = build_components(settings_with_keys(tmp_path, None))
        components.refresher.start()

        await components.aclose()

        assert not components.refresher.running
