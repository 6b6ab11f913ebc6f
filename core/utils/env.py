"""Environment and option parsing helpers used across the relay."""

from __future__ import annotations

import os

from core.exceptions import ConfigurationError

__all__ = ["get_env", "parse_port", "parse_timeout"]

_MAX_PORT = 65535


def get_env(key: str, default: str | None = None) -> str | None:
    """Return an environment variable, or ``default`` when it is unset."""

    return os.getenv(key, default)


def parse_port(raw: str | int, key: str) -> int:
    """Return ``raw`` as a TCP port number or raise :class:`ConfigurationError`."""

    try:
        port = int(str(raw).strip())
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be an integer port, got {raw!r}", key=key) from exc

    if not 0 < port <= _MAX_PORT:
        raise ConfigurationError(f"{key} must be between 1 and {_MAX_PORT}, got {port}", key=key)
    return port


def parse_timeout(raw: str | float | None, key: str) -> float | None:
    """Return a timeout in seconds; empty values disable the timeout."""

    if raw is None:
        return None
    text = str(raw).strip()
    if not text:
        return None

    try:
        timeout = float(text)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be a number of seconds, got {raw!r}", key=key) from exc

    if timeout <= 0:
        raise ConfigurationError(f"{key} must be positive, got {timeout}", key=key)
    return timeout
