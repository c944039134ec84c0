"""
Django admin configuration for the account directory.

Related files:
    - models.py: User
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from authentication.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin configuration for User model.

    Moderation fields are read-only here; changes go through the
    moderation API so they are logged and applied atomically.
    """

    list_display = (
        "email",
        "display_name",
        "role",
        "moderation_status",
        "is_online",
        "date_joined",
    )
    list_filter = (
        "role",
        "moderation_status",
        "is_online",
        "is_active",
        "is_staff",
    )
    search_fields = ("email", "display_name")
    ordering = ("-date_joined",)

    fieldsets = (
        (None, {"fields": ("email", "display_name", "password")}),
        (
            "Role & moderation",
            {
                "fields": (
                    "role",
                    "moderation_status",
                    "moderation_reason",
                    "moderated_at",
                )
            },
        ),
        ("Presence", {"fields": ("is_online", "last_seen")}),
        (
            "Status",
            {"fields": ("is_active", "is_staff", "is_superuser")},
        ),
        (
            "Permissions",
            {"fields": ("groups", "user_permissions")},
        ),
        (
            "Important dates",
            {"fields": ("date_joined", "last_login")},
        ),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "display_name", "password1", "password2"),
            },
        ),
    )

    readonly_fields = (
        "role",
        "moderation_status",
        "moderation_reason",
        "moderated_at",
        "date_joined",
        "last_login",
    )
