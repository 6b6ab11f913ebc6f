"""Reverse proxy relaying inbound requests to the upstream application server."""

from __future__ import annotations

import logging
from typing import AsyncIterator, Iterable, List, Optional, Tuple

import httpx
from fastapi import Request, Response

from core.config import Settings
from core.exceptions import UpstreamError

from .injection import rewrite_body

logger = logging.getLogger(__name__)

RawHeaders = List[Tuple[bytes, bytes]]

# Connection-scoped headers that must not be forwarded across a hop
_HOP_BY_HOP_HEADERS = frozenset(
    {
        b"connection",
        b"keep-alive",
        b"proxy-authenticate",
        b"proxy-authorization",
        b"proxy-connection",
        b"te",
        b"trailer",
        b"trailers",
        b"transfer-encoding",
        b"upgrade",
    }
)

# httpx sets Host for the upstream itself. Accept-Encoding is replaced by the
# client default, which only lists codings httpx can decode.
_EXCLUDED_REQUEST_HEADERS = _HOP_BY_HOP_HEADERS | {b"host", b"accept-encoding"}

# Content-Length is always recomputed from the relayed body
_EXCLUDED_RESPONSE_HEADERS = _HOP_BY_HOP_HEADERS | {b"content-length"}

_IDENTITY_CODING = "identity"

# Statuses that never carry a body, hence no Content-Length
_BODYLESS_STATUSES = frozenset({204, 304})


def _filter_headers(headers: Iterable[Tuple[bytes, bytes]], excluded: frozenset) -> RawHeaders:
    return [(key, value) for key, value in headers if key.lower() not in excluded]


def _request_content(request: Request) -> Optional[AsyncIterator[bytes]]:
    """Return the inbound body stream, or ``None`` when no body was declared."""

    if "content-length" in request.headers or "transfer-encoding" in request.headers:
        return request.stream()
    return None


def _parse_codings(value: str | None) -> List[str]:
    """Return the content codings named in an encoding header, minus ``identity``."""

    codings = []
    for token in (value or "").split(","):
        coding = token.split(";", 1)[0].strip().lower()
        if coding and coding != _IDENTITY_CODING:
            codings.append(coding)
    return codings


class ProxyService:
    """Relay requests to the upstream and inject the reload snippet into HTML.

    Every inbound request becomes one outbound request with the same method,
    path, query string, headers and body. The upstream response is buffered in
    full so the body can be rewritten and its ``Content-Length`` recomputed.
    """

    def __init__(
        self,
        settings: Settings,
        snippet: bytes,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.snippet = snippet
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.settings.upstream_timeout),
                follow_redirects=False,
            )
            logger.info("Upstream client created for %s", self.settings.upstream_origin)
        return self._client

    async def aclose(self) -> None:
        """Close the pooled upstream client if this service created it."""

        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    def can_decode(self, content_encoding: str | None) -> bool:
        """Return ``True`` when httpx will fully decode a body sent with ``content_encoding``.

        The client's default ``Accept-Encoding`` lists exactly the codings it
        has decoders for, so it doubles as the supported set.
        """

        supported = set(_parse_codings(self.client.headers.get("accept-encoding")))
        return all(coding in supported for coding in _parse_codings(content_encoding))

    def build_upstream_url(self, scope: dict) -> str:
        """Return the upstream URL for an ASGI request scope.

        The raw (still percent-encoded) path is preferred and the query string
        is carried over verbatim.
        """

        raw_path = scope.get("raw_path")
        if raw_path:
            path = raw_path.split(b"?", 1)[0].decode("latin-1")
        else:
            path = scope.get("path") or "/"

        url = f"{self.settings.upstream_origin}{path}"
        query = (scope.get("query_string") or b"").decode("latin-1")
        if query:
            url = f"{url}?{query}"
        return url

    async def forward(self, request: Request) -> Response:
        """Relay ``request`` upstream and return the (possibly rewritten) response.

        Raises:
            UpstreamError: when the outbound request cannot be built, the
                upstream cannot be reached, or its body cannot be read.
        """

        url = self.build_upstream_url(request.scope)

        try:
            outbound = self.client.build_request(
                request.method,
                url,
                headers=_filter_headers(request.headers.raw, _EXCLUDED_REQUEST_HEADERS),
                content=_request_content(request),
            )
        except (httpx.InvalidURL, ValueError, TypeError) as exc:
            raise UpstreamError(
                "Failed to build upstream request",
                stage="request",
                url=url,
                original_error=exc,
            ) from exc

        try:
            upstream = await self.client.send(outbound, stream=True)
        except httpx.HTTPError as exc:
            raise UpstreamError(
                "Upstream request failed",
                stage="dispatch",
                url=url,
                original_error=exc,
            ) from exc

        content_encoding = upstream.headers.get("content-encoding")
        decoded = self.can_decode(content_encoding)
        try:
            if decoded:
                body = await upstream.aread()
            else:
                body = b"".join([chunk async for chunk in upstream.aiter_raw()])
        except httpx.HTTPError as exc:
            raise UpstreamError(
                "Failed to read upstream response body",
                stage="read",
                url=url,
                original_error=exc,
            ) from exc
        finally:
            await upstream.aclose()

        if not decoded:
            # Still encoded: relay untouched with its Content-Encoding label
            logger.debug("Relaying %s-encoded body from %s without rewrite", content_encoding, url)
            return self._build_response(upstream, body, decoded=False)

        relayed = rewrite_body(body, upstream.headers.get("content-type"), self.snippet)
        if len(relayed) != len(body):
            logger.debug("Injected reload snippet into %s", url)

        return self._build_response(upstream, relayed, decoded=True)

    def _build_response(self, upstream: httpx.Response, body: bytes, *, decoded: bool) -> Response:
        response = Response(content=body, status_code=upstream.status_code)
        excluded = _EXCLUDED_RESPONSE_HEADERS
        if decoded:
            excluded = excluded | {b"content-encoding"}
        # Replace Starlette's defaults so repeated headers (Set-Cookie) survive
        headers = _filter_headers(upstream.headers.raw, excluded)
        if upstream.status_code >= 200 and upstream.status_code not in _BODYLESS_STATUSES:
            headers.append((b"content-length", str(len(body)).encode("latin-1")))
        response.raw_headers = [(key.lower(), value) for key, value in headers]
        return response


__all__ = ["ProxyService"]
