"""Configuration loading for mcp-gdrive.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from gdrive_mcp.config import get_settings

    settings = get_settings()
    port = settings.api.port
    api_key = settings.api.api_key
"""

from functools import lru_cache

from gdrive_mcp.config.loader import load_config
from gdrive_mcp.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{MCP_ENV}.toml (environment overrides)
    4. MCP_* environment variables (runtime overrides)

    The result is cached for the lifetime of the process; call
    `reload_settings()` to reload.

    Returns:
        Settings instance with all configuration loaded and validated

    Raises:
        ConfigFileError: If the config directory override or a TOML file is unusable
    """
    set_toml_config(load_config())

    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration.

    Returns:
        Fresh Settings instance
    """
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
