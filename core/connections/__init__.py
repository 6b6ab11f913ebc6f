"""Connection management for live-reload notification WebSockets.

The registry tracks every open browser connection so that a single trigger
can push the reload signal to all of them.
"""

from core.connections.connection_info import ConnectionInfo
from core.connections.reload_registry import ReloadConnectionRegistry

__all__ = [
    "ConnectionInfo",
    "ReloadConnectionRegistry",
]
