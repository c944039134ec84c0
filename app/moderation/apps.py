"""
Moderation application configuration.

This app owns no models; it writes moderation state onto User and
removes chat content through the chat models.
"""

from django.apps import AppConfig


class ModerationConfig(AppConfig):
    """Configuration for the moderation application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "moderation"
    verbose_name = "Moderation"
