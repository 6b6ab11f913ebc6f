"""Response schemas for the notification listener."""

from __future__ import annotations

from pydantic import BaseModel, Field


class NotifyHealth(BaseModel):
    """Health payload reporting how many browser tabs are listening."""

    status: str = "healthy"
    active_connections: int = Field(ge=0)


__all__ = ["NotifyHealth"]
