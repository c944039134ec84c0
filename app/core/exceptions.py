"""
Base exception classes for application-wide error handling.

Exceptions are reserved for failures a service cannot express as a
ServiceResult, chiefly a storage engine that stays unreachable after
bounded retries.

Exception Hierarchy:
    BaseApplicationError (base)
    └── StorageUnavailableError - Storage timeouts (retryable by caller)

Usage:
    from core.exceptions import StorageUnavailableError

    raise StorageUnavailableError("Database unreachable after 3 attempts")

    # Rendered by core.exception_handler with status=exc.http_status
    {"error": "...", "error_code": "STORAGE_UNAVAILABLE"}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context
        http_status: Status used when the error reaches the API layer
    """

    default_error_code: str = "APPLICATION_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and details keys
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class StorageUnavailableError(BaseApplicationError):
    """
    Raised when the storage engine keeps failing with transient errors.

    Raised by core.decorators.retry_on_transient_db_errors once the
    retry budget is spent. Callers may retry the whole request.

    Example:
        raise StorageUnavailableError(
            "Storage unavailable",
            details={"attempts": 3, "operation": "MessageService.append"},
        )
    """

    default_error_code: str = "STORAGE_UNAVAILABLE"
    http_status: int = 503
