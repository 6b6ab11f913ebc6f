"""Package initialisation for the reverse proxy feature."""

from .injection import inject_snippet, is_html, rewrite_body
from .routes import register_routes
from .service import ProxyService

__all__ = ["register_routes", "ProxyService", "inject_snippet", "is_html", "rewrite_body"]
