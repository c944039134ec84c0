"""
Tests for ServiceResult, BaseService and the failure response mapping.

These tests verify:
- ServiceResult success/failure construction
- Error kind to HTTP status mapping in failure_response
- BaseService logging and transaction helpers
"""

from __future__ import annotations

import pytest

from authentication.models import User
from authentication.tests.factories import UserFactory
from core.services import BaseService, ErrorKind, ServiceResult
from core.views import failure_response


class TestServiceResult:
    """Test ServiceResult construction."""

    def test_success_is_truthy(self):
        result = ServiceResult.success({"id": 1})

        assert result
        assert result.data == {"id": 1}
        assert result.error_kind is None

    def test_failure_defaults_to_invalid_state(self):
        result = ServiceResult.failure("Nope", error_code="NOPE")

        assert not result
        assert result.error_kind == ErrorKind.INVALID_STATE


class TestFailureResponse:
    """Test failure_response maps error kinds to statuses."""

    @pytest.mark.parametrize(
        "kind,expected_status",
        [
            (ErrorKind.NOT_FOUND, 404),
            (ErrorKind.ACCESS_DENIED, 403),
            (ErrorKind.INVALID_STATE, 400),
            (ErrorKind.CONFLICT, 409),
            (ErrorKind.UNAVAILABLE, 503),
        ],
    )
    def test_status_follows_kind(self, kind, expected_status):
        result = ServiceResult.failure("Failed", error_code="CODE", error_kind=kind)

        response = failure_response(result)

        assert response.status_code == expected_status
        assert response.data == {"error": "Failed", "error_code": "CODE"}


class TestBaseService:
    """Test BaseService helpers."""

    def test_logger_named_after_service(self):
        class ExampleService(BaseService):
            pass

        assert ExampleService.get_logger().name.endswith("test_services.ExampleService")

    def test_atomic_rolls_back_on_error(self, db):
        """
        Work inside BaseService.atomic() is undone when the block raises.

        Why it matters: Services rely on it so a failed membership change
        never leaves half-written rows.
        """
        with pytest.raises(RuntimeError):
            with BaseService.atomic():
                UserFactory(email="ghost@example.com")
                raise RuntimeError("abort")

        assert not User.objects.filter(email="ghost@example.com").exists()
