"""Unit tests for HTML snippet injection."""

import pytest

from features.proxy.injection import inject_snippet, is_html, rewrite_body

SNIPPET = b"<script>reload()</script>"


@pytest.mark.parametrize(
    "content_type",
    ["text/html", "text/html; charset=utf-8", "TEXT/HTML; charset=ISO-8859-1"],
)
def test_is_html_accepts_html_content_types(content_type):
    assert is_html(content_type) is True


@pytest.mark.parametrize(
    "content_type",
    [None, "", "application/json", "text/plain", "application/xhtml+xml"],
)
def test_is_html_rejects_other_content_types(content_type):
    assert is_html(content_type) is False


def test_inject_snippet_before_closing_body_tag():
    body = b"<html><body>Hi</body></html>"

    assert inject_snippet(body, SNIPPET) == b"<html><body>Hi<script>reload()</script></body></html>"


def test_inject_snippet_only_before_first_closing_tag():
    body = b"<body>a</body><body>b</body>"

    result = inject_snippet(body, SNIPPET)

    assert result == b"<body>a<script>reload()</script></body><body>b</body>"
    assert result.count(SNIPPET) == 1


def test_inject_snippet_without_closing_tag_returns_body_unchanged():
    body = b"<html><p>fragment</p></html>"

    assert inject_snippet(body, SNIPPET) == body


def test_rewrite_body_leaves_non_html_untouched():
    body = b"<body>looks like html</body>"

    assert rewrite_body(body, "text/plain", SNIPPET) == body


def test_rewrite_body_preserves_non_utf8_bytes():
    body = "<body>caf\xe9</body>".encode("latin-1")

    result = rewrite_body(body, "text/html; charset=iso-8859-1", SNIPPET)

    assert result == b"<body>caf\xe9" + SNIPPET + b"</body>"
