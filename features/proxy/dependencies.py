"""Dependency helpers for the reverse proxy feature."""

from __future__ import annotations

from fastapi import Request

from .service import ProxyService


def get_proxy_service(request: Request) -> ProxyService:
    """Return the :class:`ProxyService` attached to the proxy app."""

    return request.app.state.proxy_service


__all__ = ["get_proxy_service"]
