"""
Tests for core infrastructure views and the DRF exception handler.
"""

from unittest.mock import patch

from django.db import OperationalError
from rest_framework.test import APIClient

from core.exception_handler import application_exception_handler
from core.exceptions import StorageUnavailableError


class TestHealthCheck:
    def test_healthy(self, db):
        response = APIClient().get("/health/")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "database": "connected",
            "cache": "connected",
        }

    def test_database_down(self, db):
        with patch("core.views.connection.cursor", side_effect=OperationalError("down")):
            response = APIClient().get("/health/")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"


class TestApplicationExceptionHandler:
    def test_storage_unavailable_maps_to_503(self):
        exc = StorageUnavailableError("Storage unavailable", details={"attempts": 3})

        response = application_exception_handler(exc, {"view": None})

        assert response.status_code == 503
        assert response.data == {
            "error": "Storage unavailable",
            "error_code": "STORAGE_UNAVAILABLE",
            "details": {"attempts": 3},
        }

    def test_other_exceptions_fall_through(self):
        assert application_exception_handler(ValueError("boom"), {"view": None}) is None
