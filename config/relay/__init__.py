"""Live-reload relay configuration.

Ports, hosts and notification paths shared by the proxy and notification
listeners.
"""

from config.relay.defaults import (
    BIND_HOST,
    NOTIFY_PORT,
    PROXY_PORT,
    PUBLIC_HOST,
    RELOAD_SIGNAL,
    SOURCE_PORT,
    TRIGGER_PATH,
    UPSTREAM_HOST,
    UPSTREAM_TIMEOUT,
    WEBSOCKET_PATH,
)

__all__ = [
    # Ports
    "SOURCE_PORT",
    "PROXY_PORT",
    "NOTIFY_PORT",
    # Hosts
    "UPSTREAM_HOST",
    "BIND_HOST",
    "PUBLIC_HOST",
    # Notification listener
    "WEBSOCKET_PATH",
    "TRIGGER_PATH",
    "RELOAD_SIGNAL",
    # Upstream client
    "UPSTREAM_TIMEOUT",
]
