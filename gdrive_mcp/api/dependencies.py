"""Dependency injection for API routes.

Components are built once at app creation and stored on ``app.state``;
these dependencies hand them to route handlers. Tests override them with
``app.dependency_overrides`` or by passing their own components.
"""

from typing import Annotated

from fastapi import Depends, Request

from gdrive_mcp.bootstrap import ServerComponents
from gdrive_mcp.config.settings import Settings
from gdrive_mcp.protocol.engine import ProtocolEngine
from gdrive_mcp.sessions.registry import SessionRegistry
from gdrive_mcp.sessions.router import RequestRouter


def get_components(request: Request) -> ServerComponents:
    components: ServerComponents = request.app.state.components
    return components


ComponentsDep = Annotated[ServerComponents, Depends(get_components)]


def get_settings(components: ComponentsDep) -> Settings:
    return components.settings


def get_session_registry(components: ComponentsDep) -> SessionRegistry:
    return components.sessions


def get_request_router(components: ComponentsDep) -> RequestRouter:
    return components.router


def get_protocol_engine(components: ComponentsDep) -> ProtocolEngine:
    return components.engine


SettingsDep = Annotated[Settings, Depends(get_settings)]
SessionRegistryDep = Annotated[SessionRegistry, Depends(get_session_registry)]
RequestRouterDep = Annotated[RequestRouter, Depends(get_request_router)]
ProtocolEngineDep = Annotated[ProtocolEngine, Depends(get_protocol_engine)]
