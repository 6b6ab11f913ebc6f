"""Package initialisation for the reload notification feature."""

from .routes import register_routes
from .schemas import NotifyHealth

__all__ = ["register_routes", "NotifyHealth"]
