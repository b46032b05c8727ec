"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Request

from hookrelay.config import MatchConfig, Settings
from hookrelay.relay.client import TargetRelay


def get_settings(request: Request) -> Settings:
    """Return the settings the app was created with."""
    return request.app.state.settings


def get_match_config(request: Request) -> MatchConfig:
    """Return the filtering rules built once at startup."""
    return request.app.state.match_config


def get_relay(request: Request) -> TargetRelay:
    """Return a relay bound to the app's shared HTTP client."""
    return TargetRelay(request.app.state.http_client, request.app.state.settings.target_url)


# Type aliases for dependency injection
AppSettings = Annotated[Settings, Depends(get_settings)]
AppMatchConfig = Annotated[MatchConfig, Depends(get_match_config)]
Relay = Annotated[TargetRelay, Depends(get_relay)]
