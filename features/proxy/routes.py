"""Catch-all route relaying every request to the upstream server.

The route is a plain Starlette route with no method list, so WebDAV and other
non-standard methods reach the upstream instead of getting a 405.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, Response

from features.proxy.dependencies import get_proxy_service

CATCH_ALL_PATH = "/{full_path:path}"


async def proxy_endpoint(request: Request) -> Response:
    """Relay the request upstream; failures surface through the app's handlers."""

    return await get_proxy_service(request).forward(request)


def register_routes(app: FastAPI) -> None:
    """Attach the method-agnostic catch-all route to ``app``."""

    app.add_route(CATCH_ALL_PATH, proxy_endpoint, include_in_schema=False)


__all__ = ["proxy_endpoint", "register_routes"]
