"""
Chat application configuration.

This app provides the chat store with:
- Direct, group and global chats
- Membership with member caps
- An append-only message log per chat
- Read cursors and unread counts
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"
