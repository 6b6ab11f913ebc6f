from __future__ import annotations

"""Live-reload relay - Main Application Entry Point
Runs two FastAPI applications side by side in one process.
Architecture Overview:
    - Proxy app relays every request to the upstream server and injects the
      reload snippet into HTML responses
    - Notify app keeps browser websockets registered and broadcasts the reload
      signal when its trigger endpoint is hit
    - Both share a single RelayContext (settings, registry, snippet)
Entry Points (notify listener):
    - /ws     - Reload websocket opened by the injected snippet
    - /reload - Trigger endpoint, any method
    - /health - Health check endpoint
"""

import argparse
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from core.config import Settings
from core.context import RelayContext, create_context
from core.exceptions import ConfigurationError, UpstreamError
from core.logging import setup_logging
from core.observability import register_http_request_logging
from features.notify import register_routes as register_notify_routes
from features.proxy import ProxyService
from features.proxy import register_routes as register_proxy_routes

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def create_proxy_app(context: RelayContext, *, client: httpx.AsyncClient | None = None) -> FastAPI:
    """Application factory for the public-facing reverse proxy."""

    service = ProxyService(context.settings, context.snippet, client=client)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await service.aclose()
        logger.info("Proxy upstream client closed")

    # Docs routes are disabled so that every path reaches the upstream
    app = FastAPI(
        title="Live-reload relay proxy",
        version=VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.context = context
    app.state.proxy_service = service

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError):
        """Return a generic 500; upstream details stay in the log."""

        logger.error(
            "Upstream %s failure for %s %s: %s",
            exc.stage or "unknown",
            request.method,
            exc.url or request.url.path,
            exc.original_error or exc,
        )
        return PlainTextResponse("Server error", status_code=500)

    register_http_request_logging(app, logger_name="relay.proxy")
    register_proxy_routes(app)
    return app


def create_notify_app(context: RelayContext) -> FastAPI:
    """Application factory for the websocket notification listener."""

    app = FastAPI(
        title="Live-reload relay notifications",
        version=VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.context = context

    register_http_request_logging(app, logger_name="relay.notify")
    register_notify_routes(app, context.settings)
    return app


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line flags; unset flags fall back to the environment."""

    parser = argparse.ArgumentParser(
        prog="relay",
        description="Reverse proxy that injects a live-reload client into HTML pages.",
    )
    parser.add_argument(
        "--from",
        dest="source_port",
        default=None,
        help="The port of the original server to proxy requests to (default 8080)",
    )
    parser.add_argument(
        "--to",
        dest="proxy_port",
        default=None,
        help="The port to run the proxy server on (default 3000)",
    )
    parser.add_argument(
        "--via",
        dest="notify_port",
        default=None,
        help="The port to run the WebSocket server on (default 3001)",
    )
    parser.add_argument("--upstream-host", default=None, help="Host of the original server")
    parser.add_argument("--host", dest="bind_host", default=None, help="Bind host address for both listeners")
    parser.add_argument(
        "--public-host",
        default=None,
        help="Host name browsers use to reach the WebSocket server",
    )
    parser.add_argument("--log-level", default=None, help="Root log level (DEBUG, INFO, ...)")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Resolve settings from the environment, then apply command line overrides."""

    return Settings.from_env().with_overrides(
        source_port=args.source_port,
        proxy_port=args.proxy_port,
        notify_port=args.notify_port,
        upstream_host=args.upstream_host,
        bind_host=args.bind_host,
        public_host=args.public_host,
    )


def _build_server(app: FastAPI, host: str, port: int) -> uvicorn.Server:
    # log_config=None keeps the dictConfig installed by setup_logging
    config = uvicorn.Config(app, host=host, port=port, log_config=None, access_log=False)
    return uvicorn.Server(config)


async def run_relay(context: RelayContext) -> None:
    """Serve the notification and proxy listeners concurrently until shutdown.

    A listener that cannot bind its port makes uvicorn exit the process.
    """

    settings = context.settings
    notify_server = _build_server(create_notify_app(context), settings.bind_host, settings.notify_port)
    proxy_server = _build_server(create_proxy_app(context), settings.bind_host, settings.proxy_port)

    logger.info("Relay %s starting", VERSION)
    logger.info("WebSocket server running on :%d", settings.notify_port)
    logger.info(
        "Proxy server running on :%d -> %s",
        settings.proxy_port,
        settings.upstream_origin,
    )
    await asyncio.gather(notify_server.serve(), proxy_server.serve())


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(level=args.log_level)

    try:
        settings = build_settings(args)
    except ConfigurationError as exc:
        logger.error("Invalid configuration (%s): %s", exc.key or "unknown", exc.message)
        return 2

    try:
        asyncio.run(run_relay(create_context(settings)))
    except KeyboardInterrupt:
        logger.info("Relay stopped")
    return 0


if __name__ == "__main__":  # pragma: no cover - manual execution helper
    raise SystemExit(main())
