"""Resolved runtime settings for the live-reload relay.

Raw values come from ``config.relay.defaults`` (environment driven). This
module validates them and exposes a frozen :class:`Settings` dataclass that
is handed to both listeners at startup.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from config.relay import defaults as relay_defaults
from core.utils.env import parse_port, parse_timeout


@dataclass(frozen=True)
class Settings:
    """Dependency injection wrapper for relay settings."""

    source_port: int = 8080
    proxy_port: int = 3000
    notify_port: int = 3001
    upstream_host: str = "localhost"
    bind_host: str = "0.0.0.0"
    public_host: str = "localhost"
    websocket_path: str = "/ws"
    trigger_path: str = "/reload"
    reload_signal: str = "reload"
    upstream_timeout: float | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the environment-backed defaults module."""

        return cls(
            source_port=parse_port(relay_defaults.SOURCE_PORT, "RELAY_SOURCE_PORT"),
            proxy_port=parse_port(relay_defaults.PROXY_PORT, "RELAY_PROXY_PORT"),
            notify_port=parse_port(relay_defaults.NOTIFY_PORT, "RELAY_NOTIFY_PORT"),
            upstream_host=relay_defaults.UPSTREAM_HOST,
            bind_host=relay_defaults.BIND_HOST,
            public_host=relay_defaults.PUBLIC_HOST,
            websocket_path=_normalise_path(relay_defaults.WEBSOCKET_PATH),
            trigger_path=_normalise_path(relay_defaults.TRIGGER_PATH),
            reload_signal=relay_defaults.RELOAD_SIGNAL,
            upstream_timeout=parse_timeout(relay_defaults.UPSTREAM_TIMEOUT, "RELAY_UPSTREAM_TIMEOUT"),
        )

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-``None`` override applied and validated."""

        values = {key: value for key, value in overrides.items() if value is not None}
        for key in ("source_port", "proxy_port", "notify_port"):
            if key in values:
                values[key] = parse_port(values[key], key)
        return replace(self, **values)

    @property
    def upstream_origin(self) -> str:
        return f"http://{self.upstream_host}:{self.source_port}"

    @property
    def websocket_url(self) -> str:
        """URL the injected client uses to reach the notification listener."""

        return f"ws://{self.public_host}:{self.notify_port}{self.websocket_path}"


def _normalise_path(path: str) -> str:
    path = (path or "/").strip()
    return path if path.startswith("/") else f"/{path}"


__all__ = ["Settings"]
