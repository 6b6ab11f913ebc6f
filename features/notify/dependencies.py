"""Dependency helpers for the notification feature."""

from __future__ import annotations

from fastapi import Depends
from starlette.requests import HTTPConnection

from core.connections import ReloadConnectionRegistry
from core.context import RelayContext


def get_relay_context(connection: HTTPConnection) -> RelayContext:
    """Return the shared :class:`RelayContext` attached to the app.

    Works for both HTTP requests and WebSocket connections.
    """

    return connection.app.state.context


def get_registry(context: RelayContext = Depends(get_relay_context)) -> ReloadConnectionRegistry:
    return context.registry


__all__ = ["get_registry", "get_relay_context"]
