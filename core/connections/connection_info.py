"""Connection info dataclass for reload notification connections."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from fastapi import WebSocket


@dataclass
class ConnectionInfo:
    """Metadata about a registered notification WebSocket."""

    websocket: WebSocket
    client: str = "unknown"  # "host:port" of the browser tab
    connected_at: datetime = field(default_factory=lambda: datetime.now(UTC))


__all__ = ["ConnectionInfo"]
