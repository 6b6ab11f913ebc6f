"""Request logging helpers for HTTP and WebSocket traffic."""
from __future__ import annotations

import logging
import time
import urllib.parse
from typing import Iterable, Mapping

from fastapi import FastAPI, Request, WebSocket

_SENSITIVE_HEADERS = {"authorization", "cookie", "proxy-authorization", "x-api-key"}
_SENSITIVE_QUERY_KEYS = {
    "access_token",
    "api_key",
    "apikey",
    "auth_token",
    "password",
    "secret",
    "token",
}
_TOKEN_PREVIEW_LENGTH = 12


def _redact_token(token_value: str) -> str:
    """Return a preview of sensitive tokens while hiding the rest."""

    if len(token_value) <= _TOKEN_PREVIEW_LENGTH:
        return "***"
    return f"{token_value[:_TOKEN_PREVIEW_LENGTH]}***"


def _format_client_address(client: tuple[str, int] | None) -> str:
    if not client:
        return "unknown"
    host, port = client
    return f"{host}:{port}" if port is not None else host


def format_client(connection: Request | WebSocket) -> str:
    """Return ``host:port`` of the peer behind a request or websocket."""

    client = connection.client
    return _format_client_address((client.host, client.port) if client else None)


def _format_query(query: str) -> str:
    if not query:
        return "<none>"

    params = urllib.parse.parse_qsl(query, keep_blank_values=True)
    if not any(key.lower() in _SENSITIVE_QUERY_KEYS for key, _ in params):
        return query

    redacted = [
        (key, _redact_token(value) if key.lower() in _SENSITIVE_QUERY_KEYS else value)
        for key, value in params
    ]
    return urllib.parse.urlencode(redacted)


def _mask_headers(headers: Iterable[tuple[str, str]]) -> Mapping[str, str]:
    masked: dict[str, str] = {}
    for key, value in headers:
        if key.lower() in _SENSITIVE_HEADERS:
            masked[key] = "***"
        else:
            masked[key] = value
    return masked


def register_http_request_logging(app: FastAPI, *, logger_name: str = "core.http") -> None:
    """Attach middleware that logs every HTTP request and its outcome.

    Request bodies are never read here: the proxy streams them to the
    upstream untouched.
    """

    if getattr(app.state, "_http_request_logging_installed", False):  # pragma: no cover - idempotence
        return

    logger = logging.getLogger(logger_name)

    @app.middleware("http")
    async def _log_request(request: Request, call_next):  # type: ignore[override]
        path = request.url.path
        started = time.perf_counter()

        logger.info("HTTP %s %s from %s", request.method, path, format_client(request))
        if request.url.query:
            logger.debug("HTTP %s %s query=%s", request.method, path, _format_query(request.url.query))
        logger.debug("HTTP %s %s headers=%s", request.method, path, _mask_headers(request.headers.items()))

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "HTTP %s %s -> %d (%.1f ms)",
            request.method,
            path,
            response.status_code,
            elapsed_ms,
        )
        return response

    app.state._http_request_logging_installed = True


def log_websocket_request(
    websocket: WebSocket,
    *,
    logger: logging.Logger | None = None,
    label: str | None = None,
) -> None:
    """Log metadata about an inbound WebSocket request."""

    log = logger or logging.getLogger("core.websocket")
    name = label or "WebSocket"
    log.info("%s connection requested for %s from %s", name, websocket.url.path, format_client(websocket))

    debug_parts: list[str] = []
    if websocket.url.query:
        debug_parts.append(f"query={_format_query(websocket.url.query)}")

    headers = _mask_headers(websocket.headers.items())
    if headers:
        debug_parts.append(f"headers={headers}")

    if debug_parts:
        log.debug("%s request details: %s", name, "; ".join(debug_parts))


__all__ = ["format_client", "log_websocket_request", "register_http_request_logging"]
