"""Client-side reload snippet injected into proxied HTML pages."""

from __future__ import annotations

import json

_SNIPPET_TEMPLATE = """
    <script>
        var ws = new WebSocket({url});
        ws.onmessage = function(event) {{
            if (event.data === {signal}) {{
                window.location.reload();
            }}
        }};
    </script>
    """


def build_injection_snippet(websocket_url: str, signal: str = "reload") -> str:
    """Render the ``<script>`` block that reloads the page on ``signal``.

    Values are emitted as JSON string literals so they are valid JavaScript.
    """

    return _SNIPPET_TEMPLATE.format(url=json.dumps(websocket_url), signal=json.dumps(signal))


__all__ = ["build_injection_snippet"]
