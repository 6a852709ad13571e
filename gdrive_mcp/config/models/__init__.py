"""Configuration model exports.

    from gdrive_mcp.config.models import APIConfig, AuthConfig
"""

from gdrive_mcp.config.models.api import APIConfig
from gdrive_mcp.config.models.auth import AuthConfig
from gdrive_mcp.config.models.drive import DriveConfig
from gdrive_mcp.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)

__all__ = [
    "APIConfig",
    "AuthConfig",
    "DriveConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
]
