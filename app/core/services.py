"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ErrorKind: Failure taxonomy shared by every service
- ServiceResult: Standard result wrapper for consistent success/failure handling
- BaseService: Base class with common service utilities

Service Layer Philosophy:
    Services own the rules of the chat store. Views translate HTTP to
    service calls and results back to HTTP; models hold data and constraints.

Pattern Comparison:
    - ServiceResult: expected failures (missing chat, not a participant, full room)
    - Exceptions: unexpected failures (storage unavailable, bugs)

Usage:
    from core.services import BaseService, ErrorKind, ServiceResult

    class ChatService(BaseService):
        @classmethod
        def get_chat(cls, chat_id: int, user) -> ServiceResult[Chat]:
            chat = Chat.objects.filter(pk=chat_id).first()
            if chat is None:
                return ServiceResult.failure(
                    "Chat not found",
                    error_code="CHAT_NOT_FOUND",
                    error_kind=ErrorKind.NOT_FOUND,
                )
            return ServiceResult.success(chat)

    # In view
    result = ChatService.get_chat(pk, request.user)
    if not result.success:
        return failure_response(result)
    return Response(ChatSerializer(result.data).data)

Related:
    - core.exceptions: For unexpected/exceptional errors
    - core.decorators: Transient storage retry
"""

from __future__ import annotations

import enum
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator

# Generic type for ServiceResult data
T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    """
    Failure taxonomy for service results.

    The HTTP layer maps each kind to a status code; services never
    produce user-facing status information themselves.
    """

    NOT_FOUND = "not_found"
    ACCESS_DENIED = "access_denied"
    INVALID_STATE = "invalid_state"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Provides consistent success/failure handling without exceptions.
    Use this for expected failures (business rule violations).

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for client handling
        error_kind: Taxonomy bucket of the failure
        errors: Field-level errors for validation failures

    Usage:
        # Success case
        return ServiceResult.success(chat)

        # Failure case
        return ServiceResult.failure(
            "Chat is full",
            error_code="CHAT_FULL",
            error_kind=ErrorKind.INVALID_STATE,
        )
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None
    error_kind: ErrorKind | None = None
    errors: dict[str, list[str]] | None = field(default=None)

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)

    @classmethod
    def failure(
        cls,
        error: str,
        error_code: str | None = None,
        error_kind: ErrorKind = ErrorKind.INVALID_STATE,
        errors: dict[str, list[str]] | None = None,
    ) -> ServiceResult[T]:
        """
        Create a failed result.

        Args:
            error: Human-readable error message
            error_code: Machine-readable error code for client handling
            error_kind: Taxonomy bucket (defaults to INVALID_STATE)
            errors: Field-level errors (for validation failures)

        Returns:
            ServiceResult with success=False and error details

        Example:
            return ServiceResult.failure(
                "Message not found",
                error_code="MESSAGE_NOT_FOUND",
                error_kind=ErrorKind.NOT_FOUND,
            )
        """
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            error_kind=error_kind,
            errors=errors,
        )

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Use @classmethod (no instance state)
        - Use ServiceResult for expected failures
        - Raise exceptions for unexpected failures
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        Thin wrapper around Django's transaction.atomic() that keeps
        transaction boundaries explicit in service code. Nested use
        creates a savepoint.
        """
        with transaction.atomic():
            yield
