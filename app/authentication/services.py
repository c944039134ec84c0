"""
Account directory services.

This module provides the AccountService class for user provisioning,
presence tracking and user search.

Related files:
    - models.py: User
    - tasks.py: Periodic presence cleanup
    - moderation/services.py: The only writer of moderation fields

Usage:
    from authentication.services import AccountService

    # First authentication from the identity provider
    result = AccountService.provision_user("sam@example.com", "Sam")

    # Client heartbeat
    AccountService.set_online_status(request.user, is_online=True)

    # Find someone to start a direct chat with
    result = AccountService.search_users("sa", exclude=request.user)
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from django.db.models import Q
from django.utils import timezone

from authentication.constants import PRESENCE_CONFIG, SEARCH_CONFIG
from authentication.models import User
from core.decorators import retry_on_transient_db_errors
from core.services import BaseService, ErrorKind, ServiceResult

if TYPE_CHECKING:
    from django.db.models import QuerySet


class AccountService(BaseService):
    """
    Account provisioning, presence and search.

    Methods:
        provision_user: Get or create a user on first authentication
        set_online_status: Update presence flag and last_seen
        search_users: Case-insensitive email/display name search
        mark_idle_users_offline: Flip stale online flags (periodic task)
    """

    @classmethod
    @retry_on_transient_db_errors()
    def provision_user(cls, email: str, display_name: str = "") -> ServiceResult[User]:
        """
        Get or create the local user record for an authenticated identity.

        Idempotent by email: repeated calls for the same identity return
        the same user and never overwrite an existing display name.

        Args:
            email: Email asserted by the identity provider
            display_name: Name to use when the user is created

        Returns:
            ServiceResult with the user
        """
        if not email or not email.strip():
            return ServiceResult.failure(
                "Email is required",
                error_code="EMAIL_REQUIRED",
                error_kind=ErrorKind.INVALID_STATE,
            )

        email = User.objects.normalize_email(email.strip())
        user = User.objects.filter(email__iexact=email).first()
        if user is not None:
            return ServiceResult.success(user)

        user = User.objects.create_user(email=email, display_name=display_name)
        cls.get_logger().info(f"Provisioned user {user.id} for {email}")
        return ServiceResult.success(user)

    @classmethod
    @retry_on_transient_db_errors()
    def set_online_status(cls, user: User, is_online: bool) -> ServiceResult[User]:
        """
        Record a presence update from the client.

        Args:
            user: The caller
            is_online: New presence flag

        Returns:
            ServiceResult with the updated user
        """
        user.is_online = is_online
        user.last_seen = timezone.now()
        user.save(update_fields=["is_online", "last_seen", "updated_at"])
        return ServiceResult.success(user)

    @classmethod
    def search_users(
        cls,
        query: str,
        exclude: User | None = None,
    ) -> ServiceResult[QuerySet[User]]:
        """
        Search users by email or display name.

        Banned users and the caller are excluded.

        Args:
            query: Search text (at least two characters)
            exclude: User to leave out of the results, usually the caller

        Returns:
            ServiceResult with up to SEARCH_CONFIG.MAX_RESULTS users
        """
        query = (query or "").strip()
        if len(query) < SEARCH_CONFIG.MIN_QUERY_LENGTH:
            return ServiceResult.failure(
                f"Search query must be at least {SEARCH_CONFIG.MIN_QUERY_LENGTH} characters",
                error_code="QUERY_TOO_SHORT",
                error_kind=ErrorKind.INVALID_STATE,
            )

        users = User.objects.filter(
            Q(email__icontains=query) | Q(display_name__icontains=query),
            is_active=True,
        ).exclude(moderation_status=User.ModerationStatus.BANNED)
        if exclude is not None:
            users = users.exclude(pk=exclude.pk)

        return ServiceResult.success(
            users.order_by("display_name", "email")[: SEARCH_CONFIG.MAX_RESULTS]
        )

    @classmethod
    def mark_idle_users_offline(cls) -> int:
        """
        Mark online users with stale heartbeats as offline.

        Returns:
            Number of users marked offline
        """
        timeout = PRESENCE_CONFIG.IDLE_TIMEOUT_SECONDS
        cutoff = timezone.now() - timedelta(seconds=timeout)

        updated = User.objects.filter(is_online=True).filter(
            Q(last_seen__lt=cutoff) | Q(last_seen__isnull=True)
        ).update(is_online=False)

        if updated:
            cls.get_logger().info(f"Marked {updated} idle users offline")
        return updated
