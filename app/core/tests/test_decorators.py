"""
Tests for core decorators.

These tests verify the bounded storage retry:
- Success on first attempt passes through
- Transient errors are retried up to the budget
- Exhausted budget raises StorageUnavailableError
- Non-transient errors propagate untouched
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from django.db import IntegrityError, OperationalError

from core.decorators import retry_on_transient_db_errors
from core.exceptions import StorageUnavailableError


@pytest.fixture(autouse=True)
def no_sleep():
    """Skip backoff sleeps so retry tests run instantly."""
    with patch("core.decorators.time.sleep") as mock_sleep:
        yield mock_sleep


class TestRetryOnTransientDbErrors:
    """Test retry_on_transient_db_errors behavior."""

    def test_returns_value_without_retry(self):
        """A successful call runs exactly once."""
        func = MagicMock(return_value="ok")
        wrapped = retry_on_transient_db_errors(attempts=3)(func)

        assert wrapped() == "ok"
        assert func.call_count == 1

    def test_retries_then_succeeds(self, no_sleep):
        """
        A transient failure followed by success returns the value.

        Why it matters: A dropped connection mid-request should not
        surface to the client when the next attempt works.
        """
        func = MagicMock(side_effect=[OperationalError("timeout"), "ok"])
        func.__qualname__ = "load"
        wrapped = retry_on_transient_db_errors(attempts=3)(func)

        assert wrapped() == "ok"
        assert func.call_count == 2
        no_sleep.assert_called_once()

    def test_raises_unavailable_after_budget(self):
        """
        Exhausting attempts raises StorageUnavailableError.

        Why it matters: The caller gets a typed, retryable failure
        instead of a hung handler or a raw driver error.
        """
        func = MagicMock(side_effect=OperationalError("timeout"))
        func.__qualname__ = "load"
        wrapped = retry_on_transient_db_errors(attempts=3)(func)

        with pytest.raises(StorageUnavailableError) as exc_info:
            wrapped()

        assert func.call_count == 3
        assert exc_info.value.error_code == "STORAGE_UNAVAILABLE"
        assert exc_info.value.http_status == 503
        assert exc_info.value.details["attempts"] == 3

    def test_integrity_error_is_not_retried(self):
        """Constraint violations are not transient and propagate immediately."""
        func = MagicMock(side_effect=IntegrityError("duplicate"))
        func.__qualname__ = "create"
        wrapped = retry_on_transient_db_errors(attempts=3)(func)

        with pytest.raises(IntegrityError):
            wrapped()

        assert func.call_count == 1

    def test_default_attempts_from_settings(self, settings):
        """Attempt budget defaults to STORAGE_RETRY_ATTEMPTS."""
        settings.STORAGE_RETRY_ATTEMPTS = 2
        func = MagicMock(side_effect=OperationalError("timeout"))
        func.__qualname__ = "load"
        wrapped = retry_on_transient_db_errors()(func)

        with pytest.raises(StorageUnavailableError):
            wrapped()

        assert func.call_count == 2
