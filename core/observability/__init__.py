"""Observability helpers for request and WebSocket logging."""

from .request_logging import (
    format_client,
    log_websocket_request,
    register_http_request_logging,
)

__all__ = [
    "format_client",
    "log_websocket_request",
    "register_http_request_logging",
]
