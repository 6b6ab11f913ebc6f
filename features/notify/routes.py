"""Notification listener: reload websocket, trigger and health endpoints.

Browser tabs open a websocket on the upgrade path and stay registered until
they disconnect or a broadcast to them fails. Any request on the trigger path
pushes the reload signal to every registered tab.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, FastAPI, Request, Response, WebSocket, status

from core.config import Settings
from core.connections import ReloadConnectionRegistry
from core.observability import format_client, log_websocket_request
from features.notify.dependencies import get_registry, get_relay_context
from features.notify.schemas import NotifyHealth

logger = logging.getLogger(__name__)


async def reload_websocket_endpoint(
    websocket: WebSocket,
    registry: ReloadConnectionRegistry = Depends(get_registry),
) -> None:
    """Accept a browser connection and keep it registered while it is open."""

    log_websocket_request(websocket, logger=logger, label="Reload websocket")
    client = format_client(websocket)

    try:
        await websocket.accept()
    except Exception as exc:
        logger.debug("Reload websocket handshake with %s failed: %s", client, exc)
        return

    await registry.register(websocket, client)
    try:
        # Server is write-only; inbound frames are drained and discarded
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.debug("Reload websocket %s disconnected", client)
                break
    finally:
        await registry.unregister(websocket)


async def trigger_reload_endpoint(request: Request) -> Response:
    """Broadcast the reload signal to every registered connection."""

    context = get_relay_context(request)
    registry = context.registry
    logger.info("Reload triggered for %d connection(s)", registry.active_count)
    await registry.broadcast(context.settings.reload_signal)
    return Response(status_code=status.HTTP_200_OK)


async def health_endpoint(
    registry: ReloadConnectionRegistry = Depends(get_registry),
) -> NotifyHealth:
    return NotifyHealth(active_connections=registry.active_count)


def build_router(settings: Settings) -> APIRouter:
    """Return a router with the reload websocket and health endpoints."""

    router = APIRouter(tags=["Notify"])
    router.add_api_websocket_route(settings.websocket_path, reload_websocket_endpoint)
    router.add_api_route(
        "/health",
        health_endpoint,
        methods=["GET"],
        response_model=NotifyHealth,
        summary="Report notification listener health",
    )
    return router


def register_routes(app: FastAPI, settings: Settings) -> None:
    """Attach the notification endpoints to ``app``.

    The trigger is a plain Starlette route with no method list so that any
    request on its path, TRACE and custom methods included, fires a reload.
    """

    app.add_route(settings.trigger_path, trigger_reload_endpoint, include_in_schema=False)
    app.include_router(build_router(settings))


__all__ = [
    "build_router",
    "register_routes",
    "health_endpoint",
    "reload_websocket_endpoint",
    "trigger_reload_endpoint",
]
