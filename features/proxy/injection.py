"""HTML rewriting applied to proxied upstream responses."""

from __future__ import annotations

CLOSING_BODY_TAG = b"</body>"


def is_html(content_type: str | None) -> bool:
    """True when a ``Content-Type`` header value denotes an HTML document."""

    return "text/html" in (content_type or "").lower()


def inject_snippet(body: bytes, snippet: bytes) -> bytes:
    """Insert ``snippet`` before the first closing body tag.

    Bodies without a closing body tag are returned unchanged.
    """

    return body.replace(CLOSING_BODY_TAG, snippet + CLOSING_BODY_TAG, 1)


def rewrite_body(body: bytes, content_type: str | None, snippet: bytes) -> bytes:
    if not is_html(content_type):
        return body
    return inject_snippet(body, snippet)


__all__ = ["CLOSING_BODY_TAG", "inject_snippet", "is_html", "rewrite_body"]
