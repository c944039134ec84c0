"""
Authentication models.

This module defines the account directory:
- User: Custom user model with email-based authentication, presence,
  role and moderation state

Related files:
    - managers.py: Custom user manager for email-based creation
    - services.py: AccountService (provisioning, presence, search)

Note:
    Moderation fields (role, moderation_status, moderation_reason,
    moderated_at) are written only by moderation.services.ModerationService.
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager
from core.model_mixins import UUIDPrimaryKeyMixin


class User(UUIDPrimaryKeyMixin, AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Users are provisioned on first authentication with the external
    identity provider; chats and messages reference them by id.

    Fields:
        email: Primary identifier, unique, used for login
        display_name: Name shown to other users
        role: user, moderator or admin
        moderation_status: none, restricted or banned
        moderation_reason: Reason recorded with the last moderation action
        moderated_at: When the current moderation status was applied
        is_online: Presence flag maintained by the client heartbeat
        last_seen: Last presence update
        is_active / is_staff: Django auth flags
        date_joined / updated_at: Timestamps

    Usage:
        user = User.objects.create_user(
            email="user@example.com",
            display_name="Sam",
        )
    """

    class Role(models.TextChoices):
        USER = "user", "User"
        MODERATOR = "moderator", "Moderator"
        ADMIN = "admin", "Admin"

    class ModerationStatus(models.TextChoices):
        NONE = "none", "None"
        RESTRICTED = "restricted", "Restricted"
        BANNED = "banned", "Banned"

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )
    display_name = models.CharField(
        max_length=100,
        blank=True,
        help_text="Name shown to other users",
    )

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.USER,
        db_index=True,
        help_text="Authorization role",
    )
    moderation_status = models.CharField(
        max_length=20,
        choices=ModerationStatus.choices,
        default=ModerationStatus.NONE,
        db_index=True,
        help_text="Current moderation state",
    )
    moderation_reason = models.TextField(
        blank=True,
        help_text="Reason for the current moderation state",
    )
    moderated_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the current moderation state was applied",
    )

    is_online = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Whether the user is currently online",
    )
    last_seen = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Last presence update",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(
        auto_now_add=True,
        help_text="When the user account was created",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the user record was last modified",
    )

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.display_name or self.email

    def get_short_name(self):
        return self.display_name or self.email.split("@")[0]

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN

    @property
    def is_moderator(self) -> bool:
        """Moderators and admins may delete other users' messages."""
        return self.role in (self.Role.MODERATOR, self.Role.ADMIN)

    @property
    def is_banned(self) -> bool:
        return self.moderation_status == self.ModerationStatus.BANNED

    @property
    def is_restricted(self) -> bool:
        return self.moderation_status == self.ModerationStatus.RESTRICTED
