"""
Moderation services.

This module provides the ModerationService class, the only writer of
user moderation state and roles, and the admin path for deleting chats,
messages and users.

Every operation:
    - requires the actor to hold the admin role (ADMIN_REQUIRED otherwise)
    - runs in a single transaction
    - logs the action (denials at warning)

Related files:
    - authentication/models.py: User.moderation_status / role
    - chat/services.py: Enforces bans and restrictions on chat operations

Usage:
    from moderation.services import ModerationService

    result = ModerationService.ban_user(request.user, user_id, reason="Spam")
    if not result.success:
        return failure_response(result)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db.models import Count, Q
from django.utils import timezone

from authentication.models import User
from chat.models import Chat, Message
from core.decorators import retry_on_transient_db_errors
from core.services import BaseService, ErrorKind, ServiceResult

if TYPE_CHECKING:
    from django.db.models import QuerySet

DEFAULT_REASON = "No reason provided"


class ModerationService(BaseService):
    """
    Admin-only moderation operations.

    Methods:
        ban_user / restrict_user: Apply a moderation status
        lift_ban / lift_restriction: Clear a moderation status
        set_role: Change a user's role
        delete_user: Tombstone the user's messages, then delete the user
        delete_chat: Delete a chat with its messages and memberships
        delete_message: Delete a single message
        get_stats: Headline counts for the admin dashboard
        list_users / list_chats / list_messages: Admin listings
    """

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @classmethod
    def _require_admin(cls, actor: User, action: str) -> ServiceResult | None:
        if actor.is_admin:
            return None
        cls.get_logger().warning(f"User {actor.id} denied moderation action {action}")
        return ServiceResult.failure(
            "Admin role required",
            error_code="ADMIN_REQUIRED",
            error_kind=ErrorKind.ACCESS_DENIED,
        )

    @classmethod
    def _load_target(
        cls,
        actor: User,
        user_id,
        action: str,
    ) -> tuple[User | None, ServiceResult | None]:
        """Admin check plus target lookup shared by the user operations."""
        denied = cls._require_admin(actor, action)
        if denied:
            return None, denied

        target = User.objects.filter(pk=user_id).first()
        if target is None:
            return None, ServiceResult.failure(
                f"User {user_id} not found",
                error_code="USER_NOT_FOUND",
                error_kind=ErrorKind.NOT_FOUND,
            )
        if target.pk == actor.pk:
            return None, ServiceResult.failure(
                "Admins cannot apply this action to themselves",
                error_code="CANNOT_MODERATE_SELF",
            )
        return target, None

    @classmethod
    def _apply_status(
        cls,
        actor: User,
        user_id,
        status: str,
        reason: str | None,
        action: str,
    ) -> ServiceResult[User]:
        target, failure = cls._load_target(actor, user_id, action)
        if failure:
            return failure

        with cls.atomic():
            target.moderation_status = status
            target.moderation_reason = (reason or "").strip() or DEFAULT_REASON
            target.moderated_at = timezone.now()
            target.save(
                update_fields=[
                    "moderation_status",
                    "moderation_reason",
                    "moderated_at",
                    "updated_at",
                ]
            )

        cls.get_logger().info(
            f"Admin {actor.id} {action} user {target.id}: {target.moderation_reason}"
        )
        return ServiceResult.success(target)

    @classmethod
    def _clear_status(
        cls,
        actor: User,
        user_id,
        expected: str,
        action: str,
    ) -> ServiceResult[User]:
        target, failure = cls._load_target(actor, user_id, action)
        if failure:
            return failure

        if target.moderation_status != expected:
            return ServiceResult.failure(
                f"User is not {expected}",
                error_code="INVALID_MODERATION_STATE",
            )

        with cls.atomic():
            target.moderation_status = User.ModerationStatus.NONE
            target.moderation_reason = ""
            target.moderated_at = None
            target.save(
                update_fields=[
                    "moderation_status",
                    "moderation_reason",
                    "moderated_at",
                    "updated_at",
                ]
            )

        cls.get_logger().info(f"Admin {actor.id} {action} user {target.id}")
        return ServiceResult.success(target)

    # -------------------------------------------------------------------------
    # User moderation
    # -------------------------------------------------------------------------

    @classmethod
    @retry_on_transient_db_errors()
    def ban_user(cls, actor: User, user_id, reason: str | None = None) -> ServiceResult[User]:
        """
        Ban a user. Banned users are refused on all chat endpoints.

        Error codes:
            ADMIN_REQUIRED, USER_NOT_FOUND, CANNOT_MODERATE_SELF
        """
        return cls._apply_status(
            actor, user_id, User.ModerationStatus.BANNED, reason, "banned"
        )

    @classmethod
    @retry_on_transient_db_errors()
    def restrict_user(
        cls, actor: User, user_id, reason: str | None = None
    ) -> ServiceResult[User]:
        """
        Restrict a user. Restricted users can read but not post or create chats.

        Error codes:
            ADMIN_REQUIRED, USER_NOT_FOUND, CANNOT_MODERATE_SELF
        """
        return cls._apply_status(
            actor, user_id, User.ModerationStatus.RESTRICTED, reason, "restricted"
        )

    @classmethod
    @retry_on_transient_db_errors()
    def lift_ban(cls, actor: User, user_id) -> ServiceResult[User]:
        """
        Error codes:
            ADMIN_REQUIRED, USER_NOT_FOUND, INVALID_MODERATION_STATE
        """
        return cls._clear_status(actor, user_id, User.ModerationStatus.BANNED, "unbanned")

    @classmethod
    @retry_on_transient_db_errors()
    def lift_restriction(cls, actor: User, user_id) -> ServiceResult[User]:
        return cls._clear_status(
            actor, user_id, User.ModerationStatus.RESTRICTED, "unrestricted"
        )

    @classmethod
    @retry_on_transient_db_errors()
    def set_role(cls, actor: User, user_id, role: str) -> ServiceResult[User]:
        """
        Change a user's role.

        Error codes:
            ADMIN_REQUIRED, USER_NOT_FOUND, CANNOT_MODERATE_SELF, INVALID_ROLE
        """
        target, failure = cls._load_target(actor, user_id, "set_role")
        if failure:
            return failure

        if role not in User.Role.values:
            return ServiceResult.failure(
                f"Unknown role: {role}",
                error_code="INVALID_ROLE",
            )

        with cls.atomic():
            previous = target.role
            target.role = role
            target.save(update_fields=["role", "updated_at"])

        cls.get_logger().info(
            f"Admin {actor.id} changed role of user {target.id} from {previous} to {role}"
        )
        return ServiceResult.success(target)

    @classmethod
    @retry_on_transient_db_errors()
    def delete_user(cls, actor: User, user_id) -> ServiceResult[None]:
        """
        Delete a user account.

        The user's messages stay in their chats with no sender (rendered as
        "Deleted user"). Memberships, read cursors and direct-chat pair rows
        go with the user; the direct chats themselves remain.

        Error codes:
            ADMIN_REQUIRED, USER_NOT_FOUND, CANNOT_MODERATE_SELF
        """
        target, failure = cls._load_target(actor, user_id, "delete_user")
        if failure:
            return failure

        with cls.atomic():
            tombstoned = Message.objects.filter(sender=target).update(sender=None)
            target.delete()

        cls.get_logger().info(
            f"Admin {actor.id} deleted user {user_id} ({tombstoned} messages tombstoned)"
        )
        return ServiceResult.success(None)

    # -------------------------------------------------------------------------
    # Content moderation
    # -------------------------------------------------------------------------

    @classmethod
    @retry_on_transient_db_errors()
    def delete_chat(cls, actor: User, chat_id: int) -> ServiceResult[None]:
        """
        Delete a chat with its participants, messages and read cursors.

        Error codes:
            ADMIN_REQUIRED, CHAT_NOT_FOUND
        """
        denied = cls._require_admin(actor, "delete_chat")
        if denied:
            return denied

        with cls.atomic():
            chat = Chat.objects.filter(pk=chat_id).first()
            if chat is None:
                return ServiceResult.failure(
                    f"Chat {chat_id} not found",
                    error_code="CHAT_NOT_FOUND",
                    error_kind=ErrorKind.NOT_FOUND,
                )
            chat.delete()

        cls.get_logger().info(f"Admin {actor.id} deleted chat {chat_id}")
        return ServiceResult.success(None)

    @classmethod
    @retry_on_transient_db_errors()
    def delete_message(cls, actor: User, message_id: int) -> ServiceResult[None]:
        denied = cls._require_admin(actor, "delete_message")
        if denied:
            return denied

        with cls.atomic():
            deleted, _ = Message.objects.filter(pk=message_id).delete()

        if not deleted:
            return ServiceResult.failure(
                f"Message {message_id} not found",
                error_code="MESSAGE_NOT_FOUND",
                error_kind=ErrorKind.NOT_FOUND,
            )

        cls.get_logger().info(f"Admin {actor.id} deleted message {message_id}")
        return ServiceResult.success(None)

    # -------------------------------------------------------------------------
    # Dashboard and listings
    # -------------------------------------------------------------------------

    @classmethod
    @retry_on_transient_db_errors()
    def get_stats(cls, actor: User) -> ServiceResult[dict]:
        denied = cls._require_admin(actor, "get_stats")
        if denied:
            return denied

        return ServiceResult.success(
            {
                "total_users": User.objects.count(),
                "online_users": User.objects.filter(is_online=True).count(),
                "total_chats": Chat.objects.count(),
                "total_messages": Message.objects.count(),
            }
        )

    @classmethod
    def list_users(cls, actor: User, search: str = "") -> ServiceResult[QuerySet[User]]:
        """All users, newest first, optionally filtered by email/display name."""
        denied = cls._require_admin(actor, "list_users")
        if denied:
            return denied

        users = User.objects.order_by("-date_joined")
        search = (search or "").strip()
        if search:
            users = users.filter(
                Q(email__icontains=search) | Q(display_name__icontains=search)
            )
        return ServiceResult.success(users)

    @classmethod
    def list_chats(cls, actor: User, kind: str | None = None) -> ServiceResult[QuerySet[Chat]]:
        denied = cls._require_admin(actor, "list_chats")
        if denied:
            return denied

        chats = Chat.objects.annotate(participant_count=Count("participants")).order_by(
            "-created_at", "-id"
        )
        if kind:
            chats = chats.filter(kind=kind)
        return ServiceResult.success(chats)

    @classmethod
    def list_messages(
        cls, actor: User, chat_id: int | None = None
    ) -> ServiceResult[QuerySet[Message]]:
        denied = cls._require_admin(actor, "list_messages")
        if denied:
            return denied

        messages = Message.objects.select_related("sender").order_by("-created_at", "-id")
        if chat_id is not None:
            messages = messages.filter(chat_id=chat_id)
        return ServiceResult.success(messages)
