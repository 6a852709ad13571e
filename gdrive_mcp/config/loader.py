"""Locate and read the TOML files behind Settings.

Files come from a single directory: `MCP_CONFIG_DIR` when set, else
`./config`, else the `config/` directory shipped next to the package.
`default.toml` and `{MCP_ENV}.toml` are both optional. Whatever exists is
merged in that order; with neither present the server runs on model
defaults and environment variables.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

from gdrive_mcp.observability.logging import get_logger

logger = get_logger(__name__)

BUNDLED_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"
DEFAULT_ENVIRONMENT = "development"


class ConfigFileError(ValueError):
    """A configured directory or file exists but cannot be used."""


def get_environment() -> str:
    return os.environ.get("MCP_ENV") or DEFAULT_ENVIRONMENT


def find_config_dir() -> Path | None:
    """Pick the directory holding the TOML files.

    Returns:
        The directory, or None when no candidate exists

    Raises:
        ConfigFileError: If MCP_CONFIG_DIR names something that is not a directory
    """
    explicit = os.environ.get("MCP_CONFIG_DIR")
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_dir():
            raise ConfigFileError(f"MCP_CONFIG_DIR is not a directory: {explicit}")
        return path

    for candidate in (Path.cwd() / "config", BUNDLED_CONFIG_DIR):
        if candidate.is_dir():
            return candidate
    return None


def config_files(config_dir: Path, environment: str) -> list[Path]:
    """Existing config files in merge order."""
    names = ["default.toml"]
    if environment != "default":
        names.append(f"{environment}.toml")
    return [config_dir / name for name in names if (config_dir / name).is_file()]


def read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigFileError(f"Invalid TOML in {path}: {e}") from e
    except OSError as e:
        raise ConfigFileError(f"Cannot read {path}: {e}") from e


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge `override` into a copy of `base`; nested tables merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_config(environment: str | None = None) -> dict[str, Any]:
    """Read and merge the TOML config for an environment.

    Args:
        environment: Environment name (defaults to MCP_ENV, then "development")

    Returns:
        Merged configuration, empty when no config files are found

    Raises:
        ConfigFileError: If the directory override or a file is unusable
    """
    env = environment or get_environment()
    config_dir = find_config_dir()
    if config_dir is None:
        logger.info("config_dir_not_found", environment=env)
        return {}

    files = config_files(config_dir, env)
    if not files:
        logger.info("config_files_not_found", config_dir=str(config_dir), environment=env)

    config: dict[str, Any] = {}
    for path in files:
        config = deep_merge(config, read_toml(path))
    return config
