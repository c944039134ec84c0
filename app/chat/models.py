"""
Chat system models.

This module defines the data models for the chat store:
- Direct (1:1) chats between exactly two users
- Group chats created by users
- Global rooms created by the bootstrap step and joinable by anyone

Models:
    Chat: Container for messages between participants
    DirectChatPair: Enforces one direct chat per unordered user pair
    Participant: Membership of a user in a chat
    Message: Individual message within a chat
    ReadCursor: Per-participant read position used for unread counts

Design Decisions:
    - Direct chat uniqueness is a database constraint on the normalized
      pair, not a check in application code
    - Message order is (created_at, id); created_at is assigned by the
      service under the chat row lock and never by clients
    - reply_to carries no database constraint so deleting a message
      leaves replies pointing at an id that resolves to "unavailable"
    - Read state is one cursor per (chat, user); unread counts are a
      COUNT query, never per-message read flags
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from chat.constants import CHAT_CONFIG
from core.models import BaseModel


class ChatKind(models.TextChoices):
    """
    Kind of chat.

    DIRECT: Exactly two participants, unique per user pair, cap 2
    GROUP: Named chat created by a user
    GLOBAL: Public room created by the bootstrap step, joinable by anyone
    """

    DIRECT = "direct", "Direct"
    GROUP = "group", "Group"
    GLOBAL = "global", "Global Room"


class ChatVisibility(models.TextChoices):
    PUBLIC = "public", "Public"
    PRIVATE = "private", "Private"


class MessageType(models.TextChoices):
    """
    Type of message payload.

    TEXT requires content. IMAGE, FILE, VOICE_NOTE and VIDEO_NOTE require
    a media URL. VIDEO_CALL and AUDIO_CALL are call log entries and may
    carry only a duration.
    """

    TEXT = "text", "Text"
    IMAGE = "image", "Image"
    FILE = "file", "File"
    VOICE_NOTE = "voice_note", "Voice Note"
    VIDEO_NOTE = "video_note", "Video Note"
    VIDEO_CALL = "video_call", "Video Call"
    AUDIO_CALL = "audio_call", "Audio Call"


MEDIA_MESSAGE_TYPES = frozenset(
    {
        MessageType.IMAGE,
        MessageType.FILE,
        MessageType.VOICE_NOTE,
        MessageType.VIDEO_NOTE,
    }
)


class Chat(BaseModel):
    """
    A chat between participants.

    Chat Kinds:
        DIRECT: Two participants, no name, private, cap 2. Unique per
                user pair (enforced via DirectChatPair).
        GROUP: Named, creator is the first participant.
        GLOBAL: Named, always public, browsable and joinable by anyone.

    Fields:
        kind: direct, group or global
        name: Display name (empty for direct)
        description / category / image_url: Room metadata
        visibility: public or private
        member_cap: Maximum number of participants
        created_by: Creator (null for bootstrap-created rooms)
        last_message_at: Timestamp of the most recent message

    Relationships:
        participants: Participant rows (the participant set)
        messages: Message log
        read_cursors: ReadCursor rows
        direct_pair: DirectChatPair if kind is DIRECT

    Lifecycle:
        Never deleted except by moderation, which cascades to messages,
        participants and read cursors.
    """

    kind = models.CharField(
        max_length=10,
        choices=ChatKind.choices,
        db_index=True,
        help_text="Kind of chat (direct, group or global)",
    )

    name = models.CharField(
        max_length=CHAT_CONFIG.MAX_NAME_LENGTH,
        blank=True,
        default="",
        help_text="Display name (empty for direct chats)",
    )

    description = models.TextField(
        blank=True,
        default="",
        help_text="Room description",
    )

    category = models.CharField(
        max_length=50,
        blank=True,
        default="",
        help_text="Room category (global rooms)",
    )

    image_url = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="Opaque room image URL from the media store",
    )

    visibility = models.CharField(
        max_length=10,
        choices=ChatVisibility.choices,
        default=ChatVisibility.PRIVATE,
        help_text="Whether the chat is public or private",
    )

    member_cap = models.PositiveIntegerField(
        default=CHAT_CONFIG.DEFAULT_MEMBER_CAP,
        help_text="Maximum number of participants",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_chats",
        help_text="User who created this chat (null for system-created)",
    )

    last_message_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Timestamp of most recent message",
    )

    class Meta:
        db_table = "chat_chat"
        ordering = ["-updated_at", "-id"]
        indexes = [
            models.Index(
                fields=["kind", "updated_at"],
                name="chat_kind_updated_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(kind=ChatKind.GLOBAL) | Q(visibility=ChatVisibility.PUBLIC),
                name="chat_global_is_public",
            ),
            models.CheckConstraint(
                condition=~Q(kind=ChatKind.DIRECT)
                | Q(member_cap=CHAT_CONFIG.DIRECT_MEMBER_CAP),
                name="chat_direct_cap_two",
            ),
        ]

    def __str__(self) -> str:
        if self.kind == ChatKind.DIRECT:
            return f"Direct chat {self.pk}"
        return self.name or f"Chat {self.pk}"

    @property
    def is_direct(self) -> bool:
        return self.kind == ChatKind.DIRECT

    @property
    def is_group(self) -> bool:
        return self.kind == ChatKind.GROUP

    @property
    def is_global(self) -> bool:
        return self.kind == ChatKind.GLOBAL


class DirectChatPair(models.Model):
    """
    Enforces uniqueness of direct chats between two users.

    Stores the pair in canonical order (lower user id first). The unique
    constraint is what makes get-or-create safe under concurrent calls:
    the losing insert fails and the caller re-reads the winner's row.

    Fields:
        chat: The direct chat (OneToOne, serves as PK)
        user_lower: User with the lower id
        user_higher: User with the higher id
    """

    chat = models.OneToOneField(
        Chat,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="direct_pair",
        help_text="The direct chat this pair represents",
    )

    user_lower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with lower id in this pair",
    )

    user_higher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with higher id in this pair",
    )

    class Meta:
        db_table = "chat_direct_chat_pair"
        constraints = [
            models.UniqueConstraint(
                fields=["user_lower", "user_higher"],
                name="unique_direct_chat_pair",
            ),
            models.CheckConstraint(
                condition=Q(user_lower_id__lt=F("user_higher_id")),
                name="direct_pair_user_lower_less_than_higher",
            ),
        ]

    def __str__(self) -> str:
        return f"DirectPair({self.user_lower_id}, {self.user_higher_id})"

    @staticmethod
    def normalize(user_a_id, user_b_id) -> tuple:
        """Return the pair ordered (lower, higher)."""
        if user_a_id < user_b_id:
            return user_a_id, user_b_id
        return user_b_id, user_a_id

    def includes(self, user_id) -> bool:
        return user_id in (self.user_lower_id, self.user_higher_id)


class Participant(BaseModel):
    """
    Membership of a user in a chat.

    One row per (chat, user); the rows of a chat form its participant set.
    Leaving deletes the row. Read state lives in ReadCursor, so it
    survives leaving and rejoining.
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="participants",
        help_text="The chat",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="chat_participations",
        help_text="The participating user",
    )

    class Meta:
        db_table = "chat_participant"
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["chat", "user"],
                name="unique_chat_participant",
            ),
        ]
        indexes = [
            models.Index(
                fields=["user", "chat"],
                name="chat_participant_user_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Participant({self.user_id} in {self.chat_id})"


class Message(BaseModel):
    """
    A message in a chat's append-only log.

    Only content and edited_at change after insert, and only through the
    sender's edit. Deletion removes the row; replies keep their reply_to_id.

    Fields:
        chat: Owning chat
        sender: Author (null once the author's account is deleted)
        content: Text body (optional for media messages)
        message_type: Payload type
        media_url / media_filename / media_duration / media_thumbnail_url:
            Opaque media reference owned by the external media store
        reply_to: Message in the same chat this one replies to
        edited_at: Set on each edit
        created_at: Server-assigned, immutable, orders the log
    """

    # Assigned by MessageService.append under the chat row lock
    created_at = models.DateTimeField(
        default=timezone.now,
        editable=False,
        help_text="Server-assigned timestamp that orders the chat log",
    )

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="The chat this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="chat_messages",
        help_text="Author (null when the author's account was deleted)",
    )

    content = models.TextField(
        null=True,
        blank=True,
        help_text="Message text (absent for pure-media messages)",
    )

    message_type = models.CharField(
        max_length=20,
        choices=MessageType.choices,
        default=MessageType.TEXT,
        help_text="Type of message payload",
    )

    media_url = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="Opaque media URL",
    )
    media_filename = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Original file name",
    )
    media_duration = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Duration in seconds (voice/video notes and calls)",
    )
    media_thumbnail_url = models.URLField(
        max_length=500,
        blank=True,
        default="",
        help_text="Opaque thumbnail URL",
    )

    reply_to = models.ForeignKey(
        "self",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        null=True,
        blank=True,
        related_name="+",
        help_text="Message this replies to (may point at a deleted message)",
    )

    edited_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the content was last edited",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["chat", "created_at", "id"],
                name="chat_msg_chat_created_idx",
            ),
            models.Index(
                fields=["sender"],
                name="chat_msg_sender_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Message({self.pk} in {self.chat_id})"

    def resolve_reply_to(self) -> Message | None:
        """
        Return the replied-to message, or None if it no longer exists.

        Uses the prefetched/cached target when present.
        """
        if self.reply_to_id is None:
            return None
        try:
            return self.reply_to
        except Message.DoesNotExist:
            return None


class ReadCursor(models.Model):
    """
    Read position of a user in a chat.

    Created on the first read-mark and only ever moved forward by a
    conditional UPDATE. Removed only when the chat is deleted.

    Unread count = messages in the chat with created_at > last_read_at
    whose sender is not the user.
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="read_cursors",
        help_text="The chat",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="read_cursors",
        help_text="The reader",
    )

    last_read_at = models.DateTimeField(
        help_text="Messages created at or before this instant are read",
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the cursor last moved",
    )

    class Meta:
        db_table = "chat_read_cursor"
        constraints = [
            models.UniqueConstraint(
                fields=["chat", "user"],
                name="unique_chat_read_cursor",
            ),
        ]

    def __str__(self) -> str:
        return f"ReadCursor({self.user_id} in {self.chat_id} @ {self.last_read_at})"
