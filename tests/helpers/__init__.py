"""Test doubles shared across the relay test-suite."""

from __future__ import annotations

from typing import Callable

import httpx

from core.config import Settings
from core.context import RelayContext


class FakeWebSocket:
    """Stand-in for a registered browser websocket."""

    def __init__(self, *, broken: bool = False) -> None:
        self.sent: list[str] = []
        self.broken = broken
        self.closed = False

    async def send_text(self, data: str) -> None:
        if self.broken:
            raise RuntimeError("Cannot call 'send' once a close message has been sent.")
        self.sent.append(data)

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        self.closed = True


def make_context(**overrides) -> RelayContext:
    """Return a RelayContext built from default settings plus ``overrides``."""

    return RelayContext(settings=Settings(**overrides))


def mock_upstream(
    handler: Callable[[httpx.Request], httpx.Response],
    headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Return an httpx client whose transport answers with ``handler``."""

    return httpx.AsyncClient(transport=httpx.MockTransport(handler), headers=headers)


__all__ = ["FakeWebSocket", "make_context", "mock_upstream"]
