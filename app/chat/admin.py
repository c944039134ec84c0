"""
Django admin configuration for chat models.

Provides admin interfaces for:
- Chat management
- Participant viewing
- Message moderation
- Read cursor inspection
"""

from django.contrib import admin

from chat.models import Chat, DirectChatPair, Message, Participant, ReadCursor


class ParticipantInline(admin.TabularInline):
    """Inline display of participants in chat admin."""

    model = Participant
    extra = 0
    readonly_fields = ["created_at"]
    raw_id_fields = ["user"]


@admin.register(Chat)
class ChatAdmin(admin.ModelAdmin):
    list_display = [
        "id",
        "kind",
        "name",
        "visibility",
        "member_cap",
        "created_at",
        "last_message_at",
    ]
    list_filter = ["kind", "visibility", "created_at"]
    search_fields = ["name", "id"]
    readonly_fields = ["created_at", "updated_at", "last_message_at"]
    raw_id_fields = ["created_by"]
    inlines = [ParticipantInline]
    ordering = ["-updated_at"]


@admin.register(DirectChatPair)
class DirectChatPairAdmin(admin.ModelAdmin):
    list_display = ["chat", "user_lower", "user_higher"]
    raw_id_fields = ["chat", "user_lower", "user_higher"]


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    list_display = ["id", "chat", "user", "created_at"]
    list_filter = ["chat__kind", "created_at"]
    search_fields = ["user__email", "chat__name"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["chat", "user"]
    ordering = ["-created_at"]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = [
        "id",
        "chat",
        "sender",
        "message_type",
        "content_preview",
        "edited_at",
        "created_at",
    ]
    list_filter = ["message_type", "created_at"]
    search_fields = ["content", "sender__email"]
    readonly_fields = ["created_at", "updated_at", "edited_at"]
    raw_id_fields = ["chat", "sender"]
    ordering = ["-created_at"]

    @admin.display(description="Content Preview")
    def content_preview(self, obj: Message) -> str:
        """Return truncated content for list display."""
        max_length = 50
        content = obj.content or f"[{obj.message_type}]"
        if len(content) > max_length:
            return content[:max_length] + "..."
        return content


@admin.register(ReadCursor)
class ReadCursorAdmin(admin.ModelAdmin):
    list_display = ["chat", "user", "last_read_at", "updated_at"]
    raw_id_fields = ["chat", "user"]
    readonly_fields = ["updated_at"]
