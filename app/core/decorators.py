"""
Custom decorators for service functions.

This module provides generic infrastructure decorators for:
- Bounded retry of transient storage errors
- Request/response logging

Usage:
    from core.decorators import retry_on_transient_db_errors, log_request

    class MessageService(BaseService):
        @classmethod
        @retry_on_transient_db_errors()
        def append(cls, chat_id, sender, ...):
            ...

    @log_request()
    def debug_view(request):
        ...
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Callable

from django.conf import settings
from django.db import InterfaceError, OperationalError

from core.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

TRANSIENT_DB_ERRORS = (OperationalError, InterfaceError)


def retry_on_transient_db_errors(
    attempts: int | None = None,
    backoff_seconds: float = 0.05,
):
    """
    Retry a storage-bound callable on transient database errors.

    Each attempt re-runs the whole callable, so the wrapped function must
    own its transaction (open it inside, not around, the call). After the
    last attempt fails, StorageUnavailableError is raised.

    Args:
        attempts: Maximum attempts (defaults to settings.STORAGE_RETRY_ATTEMPTS)
        backoff_seconds: Linear backoff step between attempts

    Returns:
        Decorator function

    Example:
        @retry_on_transient_db_errors(attempts=3)
        def load_chat(chat_id):
            return Chat.objects.get(pk=chat_id)
    """

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            max_attempts = attempts or getattr(settings, "STORAGE_RETRY_ATTEMPTS", 3)
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except TRANSIENT_DB_ERRORS as exc:
                    if attempt == max_attempts:
                        logger.error(
                            f"{func.__qualname__} failed after {attempt} attempts: {exc}"
                        )
                        raise StorageUnavailableError(
                            "Storage unavailable",
                            details={
                                "attempts": attempt,
                                "operation": func.__qualname__,
                            },
                        ) from exc
                    logger.warning(
                        f"Transient storage error in {func.__qualname__} "
                        f"(attempt {attempt}/{max_attempts}): {exc}"
                    )
                    time.sleep(backoff_seconds * attempt)

        return wrapper

    return decorator


def log_request(logger_name: str | None = None):
    """
    Log request/response for debugging.

    Logs request method, path, user, and response status.

    Args:
        logger_name: Optional logger name (defaults to view module)
    """

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(request, *args, **kwargs):
            log = logging.getLogger(logger_name or func.__module__)

            user_str = (
                str(request.user) if hasattr(request, "user") else "anonymous"
            )
            log.debug(
                f"Request: {request.method} {request.path}",
                extra={
                    "user": user_str,
                    "method": request.method,
                    "path": request.path,
                },
            )

            response = func(request, *args, **kwargs)

            status_code = getattr(response, "status_code", "unknown")
            log.debug(
                f"Response: {status_code} for {request.method} {request.path}",
                extra={
                    "status_code": status_code,
                    "method": request.method,
                    "path": request.path,
                },
            )

            return response

        return wrapper

    return decorator
