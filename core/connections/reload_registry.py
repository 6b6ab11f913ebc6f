"""In-memory registry for open live-reload WebSocket connections.

Tracks every browser tab connected to the notification listener. When a
reload is triggered the registry pushes the signal to all of them and drops
the ones whose transport turned out to be dead.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import Dict, List

from fastapi import WebSocket

from .connection_info import ConnectionInfo

logger = logging.getLogger(__name__)


class ReloadConnectionRegistry:
    """Lock-guarded registry of notification WebSocket connections.

    Design decisions:
    - Keyed by object identity: Starlette websockets are mappings and not hashable
    - Every read/modify/write of the mapping happens under ``self._lock``
    - Broadcast sends outside the lock so a slow tab never blocks registration
    - Connections that die silently are pruned lazily, when a send to them fails
    """

    def __init__(self) -> None:
        self._connections: Dict[int, ConnectionInfo] = {}
        self._lock = asyncio.Lock()

    async def register(self, websocket: WebSocket, client: str | None = None) -> None:
        """Add an accepted WebSocket to the live set."""

        async with self._lock:
            self._connections[id(websocket)] = ConnectionInfo(
                websocket=websocket,
                client=client or "unknown",
            )
            total = len(self._connections)

        logger.info("Registered reload connection from %s (total: %d)", client or "unknown", total)

    async def unregister(self, websocket: WebSocket) -> bool:
        """Remove a WebSocket from the live set.

        Returns True if a connection was removed; removing an unknown or
        already removed connection is a no-op.
        """
        async with self._lock:
            info = self._connections.pop(id(websocket), None)
            remaining = len(self._connections)

        if info is not None:
            logger.info(
                "Unregistered reload connection from %s (remaining: %d)",
                info.client,
                remaining,
            )
        return info is not None

    async def broadcast(self, signal: str = "reload") -> None:
        """Send ``signal`` as a text frame to every registered connection.

        A failed send closes and removes that connection only; delivery to
        the remaining connections continues. Nothing is raised to the caller.
        """
        async with self._lock:
            targets: List[ConnectionInfo] = list(self._connections.values())

        if not targets:
            logger.debug("Broadcast of %r skipped: no connections registered", signal)
            return

        failed: List[ConnectionInfo] = []
        for conn in targets:
            try:
                await conn.websocket.send_text(signal)
            except Exception as exc:
                logger.warning("Failed to push %r to %s: %s", signal, conn.client, exc)
                failed.append(conn)

        for conn in failed:
            with suppress(Exception):
                await conn.websocket.close()
            await self.unregister(conn.websocket)

        logger.info(
            "Broadcast %r to %d connection(s), %d removed",
            signal,
            len(targets) - len(failed),
            len(failed),
        )

    async def contains(self, websocket: WebSocket) -> bool:
        async with self._lock:
            return id(websocket) in self._connections

    @property
    def active_count(self) -> int:
        """Number of registered connections."""
        return len(self._connections)


__all__ = [
    "ConnectionInfo",
    "ReloadConnectionRegistry",
]
