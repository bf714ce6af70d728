"""Tests for health check results."""

import pytest

from resource_health.errors import BlockedError
from resource_health.results import HealthCheckFailure, HealthCheckSuccess


class TestResults:
    def test_success(self):
        result = HealthCheckSuccess(url="http://example.com", title="Example")
        assert result.success is True
        assert result.to_dict() == {"url": "http://example.com", "success": True, "title": "Example"}

    def test_failure_keeps_error(self):
        """Failures keep the exception for callers to inspect."""
        error = BlockedError("http://example.com", 403)
        result = HealthCheckFailure(url="http://example.com", error=error)

        assert result.success is False
        assert result.error is error
        assert result.to_dict()["error_type"] == "BlockedError"
        assert "403" in result.to_dict()["error"]

    def test_results_are_frozen(self):
        result = HealthCheckSuccess(url="http://example.com", title="Example")
        with pytest.raises(AttributeError):
            result.title = "Other"
