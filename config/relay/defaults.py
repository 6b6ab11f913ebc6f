"""Live-reload relay configuration defaults.

Centralizes the listener ports, upstream location and the paths exposed by
the notification listener. Every value can be overridden through the
environment; the command line overrides the environment in turn.
"""

from __future__ import annotations

import os

# =============================================================================
# Listener Ports
# =============================================================================

# Port of the original application server requests are relayed to
SOURCE_PORT = os.getenv("RELAY_SOURCE_PORT", "8080")

# Public-facing port of the reverse proxy
PROXY_PORT = os.getenv("RELAY_PROXY_PORT", "3000")

# Port of the websocket notification listener (embedded in the snippet)
NOTIFY_PORT = os.getenv("RELAY_NOTIFY_PORT", "3001")

# =============================================================================
# Hosts
# =============================================================================

UPSTREAM_HOST = os.getenv("RELAY_UPSTREAM_HOST", "localhost")
BIND_HOST = os.getenv("RELAY_BIND_HOST", "0.0.0.0")

# Host name the browser uses to reach the notification listener
PUBLIC_HOST = os.getenv("RELAY_PUBLIC_HOST", "localhost")

# =============================================================================
# Notification Listener Paths
# =============================================================================

WEBSOCKET_PATH = os.getenv("RELAY_WEBSOCKET_PATH", "/ws")
TRIGGER_PATH = os.getenv("RELAY_TRIGGER_PATH", "/reload")

# Payload of the single text frame pushed on every broadcast
RELOAD_SIGNAL = "reload"

# =============================================================================
# Upstream Client
# =============================================================================

# Seconds; empty means requests run until the network gives up
UPSTREAM_TIMEOUT = os.getenv("RELAY_UPSTREAM_TIMEOUT", "")
