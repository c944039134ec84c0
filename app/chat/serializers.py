"""
Serializers for chat API.

This module provides serializers for the chat system:
- Chat serializers (list summary, detail, global rooms, create)
- Participant serializers (read, add)
- Message serializers (read, create, edit, page)
- Read tracking serializers

Serializer Hierarchy:
    ChatSummarySerializer: Caller's chat list entry (ChatSummary)
    ChatDetailSerializer: Chat with participants
    GlobalRoomSerializer: Global room with participant_count/is_member
    ChatCreateSerializer: Group chat creation
    DirectChatCreateSerializer: Direct chat get-or-create

    ParticipantSerializer: Participant with user info
    ParticipantCreateSerializer: Add a user by id

    MessageSerializer: Message with reply resolution
    MessagePreviewSerializer: Minimal message for list preview
    MessageCreateSerializer / MessageEditSerializer: Write payloads
    MessagePageSerializer: One page of history (MessagePage)

Design Decisions:
    - Read and write serializers are separate
    - Write serializers only check shape; limits are enforced by services
    - Messages whose author was deleted show "Deleted user"
    - A reply to a deleted message renders as {"id": ..., "available": false}
"""

from __future__ import annotations

from rest_framework import serializers

from authentication.serializers import UserSerializer
from chat.models import (
    Chat,
    ChatKind,
    ChatVisibility,
    Message,
    MessageType,
    Participant,
    ReadCursor,
)

DELETED_USER_NAME = "Deleted user"


def sender_display_name(message: Message) -> str:
    """Display name for a message's author, tolerating deleted accounts."""
    if message.sender is None:
        return DELETED_USER_NAME
    return message.sender.display_name or message.sender.email


# =============================================================================
# Message Serializers
# =============================================================================


class MessagePreviewSerializer(serializers.ModelSerializer):
    """
    Minimal message serializer for chat list preview.

    Used to show the last message in chat lists.
    """

    sender_name = serializers.SerializerMethodField(
        help_text="Display name of the message sender"
    )

    class Meta:
        model = Message
        fields = [
            "id",
            "sender_id",
            "sender_name",
            "content",
            "message_type",
            "created_at",
        ]
        read_only_fields = fields

    def get_sender_name(self, obj: Message) -> str:
        return sender_display_name(obj)


class MessageSerializer(serializers.ModelSerializer):
    """
    Full message serializer for history pages.

    Includes sender details, media reference, and the resolved reply.
    """

    sender = UserSerializer(read_only=True, allow_null=True)
    sender_name = serializers.SerializerMethodField(
        help_text="Display name of the sender, or 'Deleted user'"
    )
    media = serializers.SerializerMethodField(
        help_text="Opaque media reference, or null for text messages"
    )
    reply_to = serializers.SerializerMethodField(
        help_text="Replied-to message; available is false once it was deleted"
    )

    class Meta:
        model = Message
        fields = [
            "id",
            "chat_id",
            "sender",
            "sender_name",
            "content",
            "message_type",
            "media",
            "reply_to",
            "edited_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_sender_name(self, obj: Message) -> str:
        return sender_display_name(obj)

    def get_media(self, obj: Message) -> dict | None:
        if not obj.media_url:
            return None
        return {
            "url": obj.media_url,
            "filename": obj.media_filename,
            "duration": obj.media_duration,
            "thumbnail_url": obj.media_thumbnail_url,
        }

    def get_reply_to(self, obj: Message) -> dict | None:
        """
        Resolve the replied-to message.

        - No reply: null
        - Target deleted: {"id": <id>, "available": false}
        - Otherwise: id, sender_name and a content preview
        """
        if obj.reply_to_id is None:
            return None
        target = obj.resolve_reply_to()
        if target is None:
            return {"id": obj.reply_to_id, "available": False}
        return {
            "id": target.id,
            "available": True,
            "sender_name": sender_display_name(target),
            "content": target.content,
            "message_type": target.message_type,
        }


class MessageCreateSerializer(serializers.Serializer):
    """
    Serializer for sending messages.

    Supports:
    - Text messages (content required)
    - Media messages (media_url required, content optional caption)
    - Replies (reply_to_id in the same chat)
    """

    content = serializers.CharField(
        required=False,
        allow_null=True,
        allow_blank=True,
        trim_whitespace=False,
        help_text="Message text",
    )
    message_type = serializers.ChoiceField(
        choices=MessageType.choices,
        default=MessageType.TEXT,
        help_text="Payload type",
    )
    media_url = serializers.URLField(
        required=False,
        allow_blank=True,
        max_length=500,
        help_text="Media URL from the media store",
    )
    media_filename = serializers.CharField(
        required=False, allow_blank=True, max_length=255
    )
    media_duration = serializers.IntegerField(
        required=False, allow_null=True, min_value=0
    )
    media_thumbnail_url = serializers.URLField(
        required=False, allow_blank=True, max_length=500
    )
    reply_to_id = serializers.IntegerField(
        required=False,
        allow_null=True,
        help_text="Message being replied to (optional)",
    )

    def media(self) -> dict:
        """The media reference in the shape MessageService.append expects."""
        data = self.validated_data
        return {
            "url": data.get("media_url", ""),
            "filename": data.get("media_filename", ""),
            "duration": data.get("media_duration"),
            "thumbnail_url": data.get("media_thumbnail_url", ""),
        }


class MessageEditSerializer(serializers.Serializer):
    """Serializer for editing message content."""

    content = serializers.CharField(
        allow_blank=True,
        trim_whitespace=False,
        help_text="New message content",
    )


class MessageListQuerySerializer(serializers.Serializer):
    """Query parameters for message history."""

    limit = serializers.IntegerField(required=False, help_text="Page size (1-100)")
    before = serializers.IntegerField(
        required=False, help_text="Return messages older than this message id"
    )


class MessagePageSerializer(serializers.Serializer):
    """One page of history, oldest message first."""

    messages = MessageSerializer(many=True)
    has_more = serializers.BooleanField()
    next_before = serializers.IntegerField(allow_null=True)


# =============================================================================
# Participant Serializers
# =============================================================================


class ParticipantSerializer(serializers.ModelSerializer):
    """Read serializer for chat participants."""

    user = UserSerializer(read_only=True)
    joined_at = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Participant
        fields = [
            "id",
            "user",
            "joined_at",
        ]
        read_only_fields = fields


class ParticipantCreateSerializer(serializers.Serializer):
    """Serializer for adding a user to a chat."""

    user_id = serializers.UUIDField(help_text="User ID to add to the chat")


# =============================================================================
# Chat Serializers
# =============================================================================


class ChatDetailSerializer(serializers.ModelSerializer):
    """Full chat details including all participants."""

    participants = ParticipantSerializer(many=True, read_only=True)
    created_by_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Chat
        fields = [
            "id",
            "kind",
            "name",
            "description",
            "category",
            "image_url",
            "visibility",
            "member_cap",
            "created_by_id",
            "participants",
            "last_message_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ChatSummarySerializer(serializers.Serializer):
    """
    Serializer for the caller's chat list.

    Wraps a ChatSummary: the chat's own fields plus the last message
    preview and the caller's unread count.

    Computed fields:
    - display_name: Name for groups, the other user's name for direct chats
    """

    id = serializers.IntegerField(source="chat.id")
    kind = serializers.CharField(source="chat.kind")
    name = serializers.CharField(source="chat.name")
    display_name = serializers.SerializerMethodField(
        help_text="Display name for the chat"
    )
    visibility = serializers.CharField(source="chat.visibility")
    member_cap = serializers.IntegerField(source="chat.member_cap")
    participants = ParticipantSerializer(source="chat.participants", many=True)
    last_message = MessagePreviewSerializer(allow_null=True)
    unread_count = serializers.IntegerField(help_text="Number of unread messages")
    last_message_at = serializers.DateTimeField(source="chat.last_message_at")
    updated_at = serializers.DateTimeField(source="chat.updated_at")

    def get_display_name(self, obj) -> str:
        chat = obj.chat
        if chat.kind != ChatKind.DIRECT:
            return chat.name

        request = self.context.get("request")
        for participant in chat.participants.all():
            if request is None or participant.user_id != request.user.pk:
                return participant.user.display_name or participant.user.email
        return chat.name or "Direct chat"


class GlobalRoomSerializer(serializers.ModelSerializer):
    """Global room with membership information for browsing."""

    participant_count = serializers.IntegerField(read_only=True)
    is_member = serializers.SerializerMethodField()

    class Meta:
        model = Chat
        fields = [
            "id",
            "name",
            "description",
            "category",
            "image_url",
            "member_cap",
            "participant_count",
            "is_member",
            "last_message_at",
        ]
        read_only_fields = fields

    def get_is_member(self, obj: Chat) -> bool:
        return bool(getattr(obj, "is_member", False))


class ChatCreateSerializer(serializers.Serializer):
    """
    Serializer for creating chats.

    Only groups can be created through this endpoint; direct chats use
    DirectChatCreateSerializer and global rooms are seeded by operators.
    """

    kind = serializers.ChoiceField(
        choices=ChatKind.choices,
        default=ChatKind.GROUP,
        help_text="Chat kind (only group is accepted)",
    )
    name = serializers.CharField(
        required=False,
        allow_blank=True,
        help_text="Group name",
    )
    description = serializers.CharField(required=False, allow_blank=True, default="")
    visibility = serializers.ChoiceField(
        choices=ChatVisibility.choices,
        required=False,
        help_text="public or private (default private)",
    )
    member_cap = serializers.IntegerField(
        required=False,
        help_text="Maximum number of participants",
    )
    member_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        default=list,
        help_text="Users to add alongside the creator",
    )


class DirectChatCreateSerializer(serializers.Serializer):
    """Serializer for starting (or reopening) a direct chat."""

    user_id = serializers.UUIDField(help_text="The other user")


# =============================================================================
# Read Tracking Serializers
# =============================================================================


class MarkReadSerializer(serializers.Serializer):
    """Request body for marking a chat read."""

    message_id = serializers.IntegerField(
        required=False,
        allow_null=True,
        help_text="Mark read up to this message (default: everything)",
    )


class ReadCursorSerializer(serializers.ModelSerializer):
    """The caller's read position in a chat."""

    class Meta:
        model = ReadCursor
        fields = [
            "chat_id",
            "last_read_at",
            "updated_at",
        ]
        read_only_fields = fields


class UnreadCountSerializer(serializers.Serializer):
    chat_id = serializers.IntegerField()
    unread_count = serializers.IntegerField()
