"""Unit tests for custom exception hierarchy."""

import httpx

from core.exceptions import ConfigurationError, ServiceError, UpstreamError


def test_configuration_error():
    """ConfigurationError should capture message and key."""

    error = ConfigurationError("Bad port", key="RELAY_PROXY_PORT")
    assert error.message == "Bad port"
    assert error.key == "RELAY_PROXY_PORT"
    assert isinstance(error, ServiceError)


def test_upstream_error_keeps_stage_and_cause():
    cause = httpx.ConnectError("connection refused")
    error = UpstreamError("Upstream request failed", stage="dispatch", url="http://localhost:8080/", original_error=cause)

    assert str(error) == "Upstream request failed"
    assert error.stage == "dispatch"
    assert error.url == "http://localhost:8080/"
    assert error.original_error is cause
    assert isinstance(error, ServiceError)
