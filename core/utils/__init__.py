"""Utility helpers shared across core packages.

Kept limited to environment and option parsing so that importing
:mod:`core.config` never pulls in feature modules.
"""

from .env import get_env, parse_port, parse_timeout

__all__ = [
    "get_env",
    "parse_port",
    "parse_timeout",
]
