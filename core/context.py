"""Process-wide state shared by the proxy and notification listeners.

Created once at startup and passed explicitly to both app factories; the
two listeners share nothing else.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from core.config import Settings
from core.connections import ReloadConnectionRegistry
from core.snippet import build_injection_snippet


@dataclass
class RelayContext:
    """Settings, connection registry and the pre-rendered injection snippet."""

    settings: Settings
    registry: ReloadConnectionRegistry = field(default_factory=ReloadConnectionRegistry)
    snippet: bytes = b""

    def __post_init__(self) -> None:
        if not self.snippet:
            self.snippet = build_injection_snippet(
                self.settings.websocket_url,
                self.settings.reload_signal,
            ).encode("utf-8")


def create_context(settings: Settings | None = None) -> RelayContext:
    """Return a fresh context built from ``settings`` (or the environment)."""

    return RelayContext(settings=settings or Settings.from_env())


__all__ = ["RelayContext", "create_context"]
