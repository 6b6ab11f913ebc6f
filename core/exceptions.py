"""Custom Exception Hierarchy for the live-reload relay
This module defines a typed exception hierarchy that enables precise error
handling across both listeners.

Exception Handling Flow:
    1. Service layer raises typed exception
    2. FastAPI exception handler catches it (see main.py)
    3. Handler converts it to the generic response the listener exposes
    4. Client receives the response, never the internal detail
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base exception for all service layer errors."""


class ConfigurationError(ServiceError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, key: str | None = None):
        self.message = message
        self.key = key
        super().__init__(self.message)


class UpstreamError(ServiceError):
    """Raised when the proxied upstream server cannot be reached or read.

    ``stage`` is one of ``"request"`` (building the outbound request),
    ``"dispatch"`` (transport failure) or ``"read"`` (body read failure).
    """

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        url: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.stage = stage
        self.url = url
        self.original_error = original_error
        super().__init__(self.message)
