"""Tests for the injected reload snippet."""

from core.config import Settings
from core.context import RelayContext, create_context
from core.snippet import build_injection_snippet


def test_snippet_points_at_notification_listener():
    snippet = build_injection_snippet("ws://localhost:3001/ws")

    assert snippet.strip().startswith("<script>")
    assert snippet.strip().endswith("</script>")
    assert 'new WebSocket("ws://localhost:3001/ws")' in snippet
    assert 'event.data === "reload"' in snippet
    assert "window.location.reload()" in snippet


def test_context_renders_snippet_once_from_settings():
    context = RelayContext(settings=Settings(notify_port=4100, public_host="dev.local"))

    assert isinstance(context.snippet, bytes)
    assert b"ws://dev.local:4100/ws" in context.snippet
    assert context.registry.active_count == 0


def test_create_context_accepts_explicit_settings():
    settings = Settings(notify_port=3999)

    context = create_context(settings)

    assert context.settings is settings
    assert b"ws://localhost:3999/ws" in context.snippet
