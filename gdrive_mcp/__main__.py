"""Command line entry point.

Example:
    # Serve with settings from config/ and MCP_* environment variables
    python -m gdrive_mcp

    # Override the bind address
    mcp-gdrive --host 127.0.0.1 --port 3001
"""

import argparse
import sys

import uvicorn

from gdrive_mcp import __version__
from gdrive_mcp.api.app import create_app
from gdrive_mcp.bootstrap import StartupError, build_components
from gdrive_mcp.config import get_settings
from gdrive_mcp.config.loader import ConfigFileError
from gdrive_mcp.config.settings import Settings
from gdrive_mcp.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mcp-gdrive",
        description="MCP server for Google Drive over HTTP+SSE",
    )
    parser.add_argument(
        "--host", type=str, default=None, help="Bind address (overrides MCP_API__HOST)"
    )
    parser.add_argument(
        "--port", "-p", type=int, default=None, help="Port to listen on (overrides MCP_API__PORT)"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with command line values taking precedence."""
    updates = {}
    if args.host is not None:
        updates["host"] = args.host
    if args.port is not None:
        updates["port"] = args.port
    if not updates:
        return settings
    return settings.model_copy(update={"api": settings.api.model_copy(update=updates)})


def serve(settings: Settings) -> None:
    """Build the app and run it until interrupted.

    uvicorn exits on its own when it cannot bind; a run that never started
    is reported as a startup error.

    Raises:
        StartupError: If setup fails or the server never starts listening
    """
    components = build_components(settings)
    app = create_app(components=components)

    config = uvicorn.Config(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_level=settings.observability.logging.level.lower(),
    )
    server = uvicorn.Server(config)
    address = f"{settings.api.host}:{settings.api.port}"

    try:
        server.run()
    except SystemExit as e:
        if server.started:
            raise
        raise StartupError(f"Cannot listen on {address}") from e

    if not server.started:
        raise StartupError(f"Server on {address} did not start")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        settings = apply_overrides(get_settings(), args)
    except ConfigFileError as e:
        logger.error("config_invalid", error=str(e))
        sys.exit(1)

    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_secrets=log_config.redact_secrets,
    )
    logger.info(
        "server_starting",
        version=__version__,
        host=settings.api.host,
        port=settings.api.port,
    )

    try:
        serve(settings)
    except StartupError as e:
        logger.error("startup_failed", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
