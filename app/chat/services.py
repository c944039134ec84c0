"""
Chat system service layer.

This module provides the business logic for the chat store, encapsulating
all operations on chats, participants, messages and read cursors.

Services:
    ChatService: Chat lifecycle (create, direct get-or-create, listings, bootstrap)
    ParticipantService: Membership (add/join, remove/leave)
    MessageService: Message log (append, edit, delete, history pages)
    ReadTrackerService: Read cursors and unread counts

Design Principles:
    - Services are stateless (use class methods)
    - Expected failures return ServiceResult.failure() tagged with an ErrorKind
    - Transient storage errors are retried, then raise StorageUnavailableError
    - Each operation commits fully or not at all
    - Writes to one chat serialize on the chat row (select_for_update)

Usage:
    from chat.services import ChatService, MessageService, ReadTrackerService

    result = ChatService.get_or_create_direct_chat(user1, user2)
    if result.success:
        chat = result.data

    result = MessageService.append(chat.id, user1, content="Hello!")

    count = ReadTrackerService.unread_count(chat.id, user2).data
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from django.db import IntegrityError, transaction
from django.db.models import Count, Exists, OuterRef, Q
from django.utils import timezone

from chat.constants import CHAT_CONFIG, DEFAULT_GLOBAL_ROOMS, MESSAGE_CONFIG
from chat.models import (
    MEDIA_MESSAGE_TYPES,
    Chat,
    ChatKind,
    ChatVisibility,
    DirectChatPair,
    Message,
    MessageType,
    Participant,
    ReadCursor,
)
from core.decorators import retry_on_transient_db_errors
from core.services import BaseService, ErrorKind, ServiceResult

if TYPE_CHECKING:
    from authentication.models import User


@dataclass
class ChatSummary:
    """A chat as shown in the caller's chat list."""

    chat: Chat
    last_message: Message | None
    unread_count: int


@dataclass
class MessagePage:
    """
    One page of chat history.

    messages are oldest-first. next_before is the id to pass as `before`
    to fetch the next older page, or None when there is nothing older.
    """

    messages: list[Message]
    has_more: bool
    next_before: int | None


def _is_participant(chat_id: int, user_id) -> bool:
    return Participant.objects.filter(chat_id=chat_id, user_id=user_id).exists()


def _chat_not_found(chat_id) -> ServiceResult:
    return ServiceResult.failure(
        f"Chat {chat_id} not found",
        error_code="CHAT_NOT_FOUND",
        error_kind=ErrorKind.NOT_FOUND,
    )


def _message_not_found(message_id) -> ServiceResult:
    return ServiceResult.failure(
        f"Message {message_id} not found",
        error_code="MESSAGE_NOT_FOUND",
        error_kind=ErrorKind.NOT_FOUND,
    )


def _banned_failure(user: User) -> ServiceResult | None:
    if user.is_banned:
        return ServiceResult.failure(
            "User is banned",
            error_code="USER_BANNED",
            error_kind=ErrorKind.ACCESS_DENIED,
        )
    return None


def _posting_failure(user: User) -> ServiceResult | None:
    """Banned and restricted users can read but not create chats or post."""
    banned = _banned_failure(user)
    if banned:
        return banned
    if user.is_restricted:
        return ServiceResult.failure(
            "User is restricted",
            error_code="USER_RESTRICTED",
            error_kind=ErrorKind.ACCESS_DENIED,
        )
    return None


def _validate_content(content: str | None, required: bool) -> ServiceResult | None:
    if content is None or not content.strip():
        if required:
            return ServiceResult.failure(
                "Message content is required",
                error_code="CONTENT_REQUIRED",
                error_kind=ErrorKind.INVALID_STATE,
            )
        return None
    if len(content) > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
        return ServiceResult.failure(
            f"Message content exceeds {MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters",
            error_code="CONTENT_TOO_LONG",
            error_kind=ErrorKind.INVALID_STATE,
        )
    return None


class ChatService(BaseService):
    """
    Service for chat lifecycle operations.

    Methods:
        create_chat: Create a group chat
        get_or_create_direct_chat: Return the unique direct chat for a pair
        bootstrap_global_rooms: Create the default public rooms
        get_chat: Chat detail with access check
        list_for_user: The caller's chats with last message and unread count
        list_global_rooms: All global rooms, browsable before joining
    """

    @classmethod
    @retry_on_transient_db_errors()
    def create_chat(
        cls,
        creator: User,
        kind: str,
        name: str | None = None,
        visibility: str | None = None,
        member_cap: int | None = None,
        description: str = "",
        initial_members: list[User] | None = None,
    ) -> ServiceResult[Chat]:
        """
        Create a new chat.

        Only group chats can be created here. Direct chats come from
        get_or_create_direct_chat and global rooms from the bootstrap step.

        Args:
            creator: User creating the chat (becomes first participant)
            kind: Requested chat kind
            name: Required display name
            visibility: public or private (default private)
            member_cap: Maximum participants (default CHAT_CONFIG.DEFAULT_MEMBER_CAP)
            description: Optional description
            initial_members: Users added alongside the creator

        Returns:
            ServiceResult with the new Chat

        Error codes:
            INVALID_CHAT_KIND: Kind is unknown, direct or global
            INVALID_VISIBILITY: Visibility is unknown
            NAME_REQUIRED / NAME_TOO_LONG: Bad display name
            INVALID_MEMBER_CAP: Cap outside 1..CHAT_CONFIG.MAX_MEMBER_CAP
            CHAT_FULL: Initial members exceed the cap
            USER_BANNED / USER_RESTRICTED: Creator may not create chats
        """
        if kind not in ChatKind.values:
            return ServiceResult.failure(
                f"Unknown chat kind: {kind}",
                error_code="INVALID_CHAT_KIND",
            )
        if kind == ChatKind.DIRECT:
            return ServiceResult.failure(
                "Direct chats are created by starting a conversation with a user",
                error_code="INVALID_CHAT_KIND",
            )
        if kind == ChatKind.GLOBAL:
            return ServiceResult.failure(
                "Global rooms cannot be created by users",
                error_code="INVALID_CHAT_KIND",
            )

        visibility = visibility or ChatVisibility.PRIVATE
        if visibility not in ChatVisibility.values:
            return ServiceResult.failure(
                f"Unknown visibility: {visibility}",
                error_code="INVALID_VISIBILITY",
            )

        blocked = _posting_failure(creator)
        if blocked:
            return blocked

        name = (name or "").strip()
        if not name:
            return ServiceResult.failure(
                "Group chats require a name",
                error_code="NAME_REQUIRED",
            )
        if len(name) > CHAT_CONFIG.MAX_NAME_LENGTH:
            return ServiceResult.failure(
                f"Name cannot exceed {CHAT_CONFIG.MAX_NAME_LENGTH} characters",
                error_code="NAME_TOO_LONG",
            )

        if member_cap is None:
            member_cap = CHAT_CONFIG.DEFAULT_MEMBER_CAP
        if not 1 <= member_cap <= CHAT_CONFIG.MAX_MEMBER_CAP:
            return ServiceResult.failure(
                f"Member cap must be between 1 and {CHAT_CONFIG.MAX_MEMBER_CAP}",
                error_code="INVALID_MEMBER_CAP",
            )

        members = {}
        for member in initial_members or []:
            if member.pk != creator.pk:
                members[member.pk] = member
        if 1 + len(members) > member_cap:
            return ServiceResult.failure(
                "Too many initial members for the member cap",
                error_code="CHAT_FULL",
            )

        with cls.atomic():
            chat = Chat.objects.create(
                kind=ChatKind.GROUP,
                name=name,
                description=description or "",
                visibility=visibility,
                member_cap=member_cap,
                created_by=creator,
            )
            Participant.objects.bulk_create(
                [Participant(chat=chat, user=creator)]
                + [Participant(chat=chat, user=member) for member in members.values()]
            )

        cls.get_logger().info(
            f"Created group chat {chat.id} '{name}' by user {creator.id} "
            f"with {len(members) + 1} participants"
        )
        return ServiceResult.success(chat)

    @classmethod
    @retry_on_transient_db_errors()
    def get_or_create_direct_chat(
        cls,
        user_a: User,
        user_b: User,
    ) -> ServiceResult[Chat]:
        """
        Return the direct chat between two users, creating it if needed.

        Implementation:
            1. Reject user_a == user_b
            2. Normalize the pair (lower id first)
            3. Look up DirectChatPair; if found, use it
            4. Otherwise insert chat + pair + participants in a savepoint
            5. If the insert loses a race (IntegrityError on the pair's
               unique constraint), roll back the savepoint and re-read
               the winner's row
            6. Re-admit either pair member who had left

        Concurrent calls for the same pair all return the same chat.

        Returns:
            ServiceResult with the direct Chat

        Error codes:
            SAME_USER: Cannot create a direct chat with yourself
            USER_BANNED / USER_RESTRICTED: Caller may not open a new chat
        """
        if user_a.pk == user_b.pk:
            return ServiceResult.failure(
                "Cannot create a direct chat with yourself",
                error_code="SAME_USER",
            )

        lower_id, higher_id = DirectChatPair.normalize(user_a.pk, user_b.pk)
        pair = cls._find_direct_pair(lower_id, higher_id)

        if pair is None:
            blocked = _posting_failure(user_a)
            if blocked:
                return blocked

            try:
                with transaction.atomic():
                    chat = Chat.objects.create(
                        kind=ChatKind.DIRECT,
                        visibility=ChatVisibility.PRIVATE,
                        member_cap=CHAT_CONFIG.DIRECT_MEMBER_CAP,
                        created_by=user_a,
                    )
                    DirectChatPair.objects.create(
                        chat=chat,
                        user_lower_id=lower_id,
                        user_higher_id=higher_id,
                    )
                    Participant.objects.bulk_create(
                        [
                            Participant(chat=chat, user_id=lower_id),
                            Participant(chat=chat, user_id=higher_id),
                        ]
                    )
            except IntegrityError:
                pair = cls._find_direct_pair(lower_id, higher_id)
                if pair is None:
                    raise
                cls.get_logger().info(
                    f"Concurrent direct chat creation for ({lower_id}, {higher_id}) "
                    f"resolved to chat {pair.chat_id}"
                )
            else:
                cls.get_logger().info(
                    f"Created direct chat {chat.id} between users {lower_id} and {higher_id}"
                )
                return ServiceResult.success(chat)

        cls._readmit_pair_members(pair)
        return ServiceResult.success(pair.chat)

    @classmethod
    def _find_direct_pair(cls, lower_id, higher_id) -> DirectChatPair | None:
        return (
            DirectChatPair.objects.select_related("chat")
            .filter(user_lower_id=lower_id, user_higher_id=higher_id)
            .first()
        )

    @classmethod
    def _readmit_pair_members(cls, pair: DirectChatPair) -> None:
        """Restore a pair member who left, so the chat has both users again."""
        present = set(
            Participant.objects.filter(chat_id=pair.chat_id).values_list(
                "user_id", flat=True
            )
        )
        missing = [
            user_id
            for user_id in (pair.user_lower_id, pair.user_higher_id)
            if user_id not in present
        ]
        if not missing:
            return

        with cls.atomic():
            for user_id in missing:
                Participant.objects.get_or_create(chat_id=pair.chat_id, user_id=user_id)
            pair.chat.save(update_fields=["updated_at"])

        cls.get_logger().info(
            f"Re-admitted users {missing} to direct chat {pair.chat_id}"
        )

    @classmethod
    @retry_on_transient_db_errors()
    def bootstrap_global_rooms(
        cls,
        rooms=DEFAULT_GLOBAL_ROOMS,
    ) -> ServiceResult[list[Chat]]:
        """
        Create the public global rooms.

        Rooms whose name already exists as a global room are skipped, so
        running the bootstrap repeatedly is safe.

        Args:
            rooms: Iterable of dicts with name, description, category and
                optional member_cap

        Returns:
            ServiceResult with the rooms created by this call
        """
        existing = set(
            Chat.objects.filter(kind=ChatKind.GLOBAL).values_list("name", flat=True)
        )
        created = []

        with cls.atomic():
            for room in rooms:
                if room["name"] in existing:
                    continue
                created.append(
                    Chat.objects.create(
                        kind=ChatKind.GLOBAL,
                        visibility=ChatVisibility.PUBLIC,
                        name=room["name"],
                        description=room.get("description", ""),
                        category=room.get("category", ""),
                        member_cap=room.get("member_cap", CHAT_CONFIG.DEFAULT_MEMBER_CAP),
                        created_by=None,
                    )
                )
                existing.add(room["name"])

        if created:
            cls.get_logger().info(
                f"Created {len(created)} global rooms: {[chat.name for chat in created]}"
            )
        return ServiceResult.success(created)

    @classmethod
    @retry_on_transient_db_errors()
    def get_chat(cls, chat_id: int, user: User) -> ServiceResult[Chat]:
        """
        Return a chat the user can see.

        Global rooms are visible to everyone; other chats only to their
        participants.

        Error codes:
            CHAT_NOT_FOUND, ACCESS_DENIED
        """
        chat = (
            Chat.objects.prefetch_related("participants__user")
            .filter(pk=chat_id)
            .first()
        )
        if chat is None:
            return _chat_not_found(chat_id)
        if not chat.is_global and not _is_participant(chat.pk, user.pk):
            return ServiceResult.failure(
                "You are not a participant in this chat",
                error_code="ACCESS_DENIED",
                error_kind=ErrorKind.ACCESS_DENIED,
            )
        return ServiceResult.success(chat)

    @classmethod
    @retry_on_transient_db_errors()
    def list_for_user(cls, user: User) -> ServiceResult[list[ChatSummary]]:
        """
        List the user's direct and group chats, most recently updated first.

        Global rooms are excluded (see list_global_rooms). Each chat carries
        its most recent message and the user's unread count. The last
        message is read before the count, so a message that arrives in
        between can only raise the count, never hide the shown message.
        """
        chats = list(
            Chat.objects.filter(participants__user=user)
            .exclude(kind=ChatKind.GLOBAL)
            .prefetch_related("participants__user")
            .order_by("-updated_at", "-id")
        )
        cursors = dict(
            ReadCursor.objects.filter(user=user, chat__in=chats).values_list(
                "chat_id", "last_read_at"
            )
        )

        summaries = []
        for chat in chats:
            last_message = (
                Message.objects.filter(chat=chat)
                .select_related("sender")
                .order_by("-created_at", "-id")
                .first()
            )
            summaries.append(
                ChatSummary(
                    chat=chat,
                    last_message=last_message,
                    unread_count=ReadTrackerService.count_unread(
                        chat.pk, user, cursors.get(chat.pk)
                    ),
                )
            )
        return ServiceResult.success(summaries)

    @classmethod
    @retry_on_transient_db_errors()
    def list_global_rooms(cls, user: User | None = None) -> ServiceResult[list[Chat]]:
        """
        List all global rooms, whether or not the user has joined them.

        Rooms are annotated with participant_count and, when a user is
        given, is_member.
        """
        rooms = (
            Chat.objects.filter(kind=ChatKind.GLOBAL)
            .annotate(participant_count=Count("participants"))
            .order_by("created_at", "id")
        )
        if user is not None:
            rooms = rooms.annotate(
                is_member=Exists(
                    Participant.objects.filter(chat=OuterRef("pk"), user=user)
                )
            )
        return ServiceResult.success(list(rooms))


class ParticipantService(BaseService):
    """
    Service for chat membership.

    Membership changes lock the chat row, so the cap check and the insert
    cannot interleave with another add to the same chat.

    Methods:
        add_participant: Add a user (or join a global room)
        remove_participant: Remove a user (or leave)
    """

    @classmethod
    @retry_on_transient_db_errors()
    def add_participant(
        cls,
        chat_id: int,
        user: User,
        added_by: User,
    ) -> ServiceResult[Participant]:
        """
        Add a user to a chat.

        Global rooms: only self-join, by a user who is not banned.
        Group and direct chats: added_by must be a participant or the
        creator; direct chats only accept their two pair members.

        Adding an existing member is a no-op that returns the existing row.

        Error codes:
            CHAT_NOT_FOUND, ACCESS_DENIED, USER_BANNED,
            DIRECT_CHAT_MEMBERSHIP, CHAT_FULL
        """
        blocked = _banned_failure(added_by)
        if blocked:
            return blocked

        with cls.atomic():
            chat = Chat.objects.select_for_update().filter(pk=chat_id).first()
            if chat is None:
                return _chat_not_found(chat_id)

            if chat.is_global:
                if added_by.pk != user.pk:
                    return ServiceResult.failure(
                        "Global rooms can only be joined by the user themselves",
                        error_code="ACCESS_DENIED",
                        error_kind=ErrorKind.ACCESS_DENIED,
                    )
            else:
                if added_by.pk != chat.created_by_id and not _is_participant(
                    chat.pk, added_by.pk
                ):
                    return ServiceResult.failure(
                        "Only participants can add users to this chat",
                        error_code="ACCESS_DENIED",
                        error_kind=ErrorKind.ACCESS_DENIED,
                    )

            existing = Participant.objects.filter(chat=chat, user=user).first()
            if existing is not None:
                return ServiceResult.success(existing)

            if chat.is_direct:
                # The pair row is gone once either of its users was deleted
                pair = DirectChatPair.objects.filter(chat=chat).first()
                if pair is None or not pair.includes(user.pk):
                    return ServiceResult.failure(
                        "Direct chats only hold their two users",
                        error_code="DIRECT_CHAT_MEMBERSHIP",
                    )

            if Participant.objects.filter(chat=chat).count() >= chat.member_cap:
                return ServiceResult.failure(
                    f"Chat is full ({chat.member_cap} members)",
                    error_code="CHAT_FULL",
                )

            participant = Participant.objects.create(chat=chat, user=user)
            chat.save(update_fields=["updated_at"])

        cls.get_logger().info(
            f"User {user.id} added to chat {chat.id} by {added_by.id}"
        )
        return ServiceResult.success(participant)

    @classmethod
    @retry_on_transient_db_errors()
    def remove_participant(
        cls,
        chat_id: int,
        user: User,
        removed_by: User,
    ) -> ServiceResult[bool]:
        """
        Remove a user from a chat.

        Anyone may remove themselves (leave). Removing someone else
        requires being the creator of a group chat. The chat and its
        history persist even when the last participant leaves; the
        user's read cursor is kept.

        Returns:
            ServiceResult with True if a participant was removed, False if
            the user was not a member

        Error codes:
            CHAT_NOT_FOUND, ACCESS_DENIED
        """
        with cls.atomic():
            chat = Chat.objects.select_for_update().filter(pk=chat_id).first()
            if chat is None:
                return _chat_not_found(chat_id)

            if removed_by.pk != user.pk and not (
                chat.is_group and chat.created_by_id == removed_by.pk
            ):
                return ServiceResult.failure(
                    "Only the group creator can remove other participants",
                    error_code="ACCESS_DENIED",
                    error_kind=ErrorKind.ACCESS_DENIED,
                )

            deleted, _ = Participant.objects.filter(chat=chat, user=user).delete()
            if deleted:
                chat.save(update_fields=["updated_at"])

        if deleted:
            cls.get_logger().info(
                f"User {user.id} removed from chat {chat.id} by {removed_by.id}"
            )
        return ServiceResult.success(bool(deleted))


class MessageService(BaseService):
    """
    Service for the message log.

    Methods:
        append: Add a message to a chat
        edit: Change the content of one's own message
        delete: Remove a message (sender or moderator)
        list_for_chat: Page through history, newest page first
    """

    @classmethod
    @retry_on_transient_db_errors()
    def append(
        cls,
        chat_id: int,
        sender: User,
        content: str | None = None,
        message_type: str = MessageType.TEXT,
        media: dict | None = None,
        reply_to_id: int | None = None,
    ) -> ServiceResult[Message]:
        """
        Append a message to a chat.

        The sender must be a participant unless the chat is a global
        room. created_at is assigned here, never by the client, and is
        always later than the chat's previous message, so the log order
        holds even if the server clock steps backwards. The chat's
        last_message_at and updated_at move in the same transaction.

        Resubmitting the same payload creates a second message.

        Args:
            chat_id: Target chat
            sender: Author
            content: Text (required for text messages)
            message_type: One of MessageType
            media: Optional {"url", "filename", "duration", "thumbnail_url"}
            reply_to_id: Message in the same chat being replied to

        Error codes:
            CHAT_NOT_FOUND, ACCESS_DENIED, USER_BANNED, USER_RESTRICTED,
            INVALID_MESSAGE_TYPE, CONTENT_REQUIRED, CONTENT_TOO_LONG,
            MEDIA_REQUIRED, INVALID_REPLY
        """
        media = media or {}

        if message_type not in MessageType.values:
            return ServiceResult.failure(
                f"Unknown message type: {message_type}",
                error_code="INVALID_MESSAGE_TYPE",
            )
        invalid = _validate_content(content, required=message_type == MessageType.TEXT)
        if invalid:
            return invalid
        if message_type in MEDIA_MESSAGE_TYPES and not media.get("url"):
            return ServiceResult.failure(
                f"{message_type} messages require a media url",
                error_code="MEDIA_REQUIRED",
            )

        blocked = _posting_failure(sender)
        if blocked:
            return blocked

        with cls.atomic():
            chat = Chat.objects.select_for_update().filter(pk=chat_id).first()
            if chat is None:
                return _chat_not_found(chat_id)
            if not chat.is_global and not _is_participant(chat.pk, sender.pk):
                return ServiceResult.failure(
                    "You are not a participant in this chat",
                    error_code="ACCESS_DENIED",
                    error_kind=ErrorKind.ACCESS_DENIED,
                )
            if (
                reply_to_id is not None
                and not Message.objects.filter(pk=reply_to_id, chat=chat).exists()
            ):
                return ServiceResult.failure(
                    "Replies must reference a message in the same chat",
                    error_code="INVALID_REPLY",
                )

            # Strictly increasing per chat, so a timestamp read cursor
            # splits the log exactly at the message it was set from
            created_at = timezone.now()
            if chat.last_message_at is not None and created_at <= chat.last_message_at:
                created_at = chat.last_message_at + timedelta(microseconds=1)

            message = Message.objects.create(
                chat=chat,
                sender=sender,
                content=content if content and content.strip() else None,
                message_type=message_type,
                media_url=media.get("url") or "",
                media_filename=media.get("filename") or "",
                media_duration=media.get("duration"),
                media_thumbnail_url=media.get("thumbnail_url") or "",
                reply_to_id=reply_to_id,
                created_at=created_at,
            )

            chat.last_message_at = created_at
            chat.save(update_fields=["last_message_at", "updated_at"])

        cls.get_logger().info(
            f"Message {message.id} ({message_type}) appended to chat {chat.id} "
            f"by user {sender.id}"
        )
        return ServiceResult.success(message)

    @classmethod
    @retry_on_transient_db_errors()
    def edit(
        cls,
        message_id: int,
        requester: User,
        content: str,
        chat_id: int | None = None,
    ) -> ServiceResult[Message]:
        """
        Replace the content of a message.

        Only the original sender may edit. Sets edited_at. When chat_id is
        given, the message must belong to that chat.

        Error codes:
            USER_BANNED, USER_RESTRICTED, MESSAGE_NOT_FOUND, NOT_OWNER,
            CONTENT_REQUIRED, CONTENT_TOO_LONG
        """
        blocked = _posting_failure(requester)
        if blocked:
            return blocked

        messages =Message.objects.select_related("sender").filter(pk=message_id)
        if chat_id is not None:
            messages = messages.filter(chat_id=chat_id)
        message = messages.first()
        if message is None:
            return _message_not_found(message_id)

        if message.sender_id is None or message.sender_id != requester.pk:
            return ServiceResult.failure(
                "Only the sender can edit this message",
                error_code="NOT_OWNER",
                error_kind=ErrorKind.ACCESS_DENIED,
            )

        invalid = _validate_content(content, required=True)
        if invalid:
            return invalid

        message.content = content
        message.edited_at = timezone.now()
        message.save(update_fields=["content", "edited_at", "updated_at"])

        cls.get_logger().info(f"Message {message.id} edited by user {requester.id}")
        return ServiceResult.success(message)

    @classmethod
    @retry_on_transient_db_errors()
    def delete(
        cls,
        message_id: int,
        requester: User,
        chat_id: int | None = None,
    ) -> ServiceResult[None]:
        """
        Delete a message.

        The sender, a moderator or an admin may delete. Replies to the
        deleted message keep their reply_to_id, which then resolves to
        "unavailable".

        Error codes:
            MESSAGE_NOT_FOUND, NOT_OWNER
        """
        messages = Message.objects.filter(pk=message_id)
        if chat_id is not None:
            messages = messages.filter(chat_id=chat_id)
        message = messages.first()
        if message is None:
            return _message_not_found(message_id)

        is_sender = message.sender_id is not None and message.sender_id == requester.pk
        if not is_sender and not requester.is_moderator:
            return ServiceResult.failure(
                "Only the sender or a moderator can delete this message",
                error_code="NOT_OWNER",
                error_kind=ErrorKind.ACCESS_DENIED,
            )

        chat_id = message.chat_id
        message.delete()

        cls.get_logger().info(
            f"Message {message_id} in chat {chat_id} deleted by user {requester.id}"
        )
        return ServiceResult.success(None)

    @classmethod
    @retry_on_transient_db_errors()
    def list_for_chat(
        cls,
        chat_id: int,
        caller: User,
        limit: int | None = None,
        before: int | None = None,
    ) -> ServiceResult[MessagePage]:
        """
        Return a page of messages older than `before`.

        The newest `limit` messages strictly before the cursor are taken
        and returned oldest-first, ordered by (created_at, id). The cursor
        is a message id; if that message has since been deleted, paging
        falls back to comparing ids.

        Args:
            chat_id: Chat to read
            caller: Must be a participant unless the chat is global
            limit: Page size, clamped to 1..MESSAGE_CONFIG.MAX_PAGE_SIZE
            before: Message id cursor (None for the newest page)

        Error codes:
            CHAT_NOT_FOUND, ACCESS_DENIED
        """
        chat = Chat.objects.filter(pk=chat_id).first()
        if chat is None:
            return _chat_not_found(chat_id)
        if not chat.is_global and not _is_participant(chat.pk, caller.pk):
            return ServiceResult.failure(
                "You are not a participant in this chat",
                error_code="ACCESS_DENIED",
                error_kind=ErrorKind.ACCESS_DENIED,
            )

        if limit is None:
            limit = MESSAGE_CONFIG.DEFAULT_PAGE_SIZE
        limit = max(1, min(limit, MESSAGE_CONFIG.MAX_PAGE_SIZE))

        messages = Message.objects.filter(chat=chat).select_related(
            "sender", "reply_to", "reply_to__sender"
        )
        if before is not None:
            anchor = (
                Message.objects.filter(pk=before, chat=chat)
                .values_list("created_at", flat=True)
                .first()
            )
            if anchor is None:
                messages = messages.filter(id__lt=before)
            else:
                messages = messages.filter(
                    Q(created_at__lt=anchor) | Q(created_at=anchor, id__lt=before)
                )

        rows = list(messages.order_by("-created_at", "-id")[: limit + 1])
        has_more = len(rows) > limit
        rows = rows[:limit]
        rows.reverse()

        return ServiceResult.success(
            MessagePage(
                messages=rows,
                has_more=has_more,
                next_before=rows[0].pk if has_more and rows else None,
            )
        )


class ReadTrackerService(BaseService):
    """
    Service for read cursors and unread counts.

    A cursor only moves forward: the advance is a conditional UPDATE
    (WHERE last_read_at < target), so duplicate or out-of-order
    read-marks can never move it back.

    Methods:
        mark_read: Advance the caller's cursor
        unread_count: Unread messages for the caller in one chat
        count_unread: Shared COUNT query used by chat listings
    """

    @classmethod
    @retry_on_transient_db_errors()
    def mark_read(
        cls,
        chat_id: int,
        user: User,
        upto_message_id: int | None = None,
    ) -> ServiceResult[ReadCursor]:
        """
        Advance the user's read cursor.

        The target is the given message's created_at, or the present
        (never earlier than the chat's newest message) if omitted. The
        cursor becomes max(current, target). Repeating the call has no
        further effect.

        Error codes:
            CHAT_NOT_FOUND, NOT_PARTICIPANT, MESSAGE_NOT_FOUND
        """
        chat = Chat.objects.filter(pk=chat_id).first()
        if chat is None:
            return _chat_not_found(chat_id)
        if not _is_participant(chat.pk, user.pk):
            return ServiceResult.failure(
                "You are not a participant in this chat",
                error_code="NOT_PARTICIPANT",
                error_kind=ErrorKind.ACCESS_DENIED,
            )

        if upto_message_id is not None:
            target = (
                Message.objects.filter(pk=upto_message_id, chat=chat)
                .values_list("created_at", flat=True)
                .first()
            )
            if target is None:
                return _message_not_found(upto_message_id)
        else:
            target = timezone.now()
            if chat.last_message_at is not None and chat.last_message_at > target:
                target = chat.last_message_at

        with cls.atomic():
            cursor, created = ReadCursor.objects.get_or_create(
                chat=chat,
                user=user,
                defaults={"last_read_at": target},
            )
            if not created:
                ReadCursor.objects.filter(
                    pk=cursor.pk, last_read_at__lt=target
                ).update(last_read_at=target, updated_at=timezone.now())
                cursor.refresh_from_db()

        return ServiceResult.success(cursor)

    @classmethod
    @retry_on_transient_db_errors()
    def unread_count(cls, chat_id: int, user: User) -> ServiceResult[int]:
        """
        Count messages in the chat the user has not read.

        Error codes:
            CHAT_NOT_FOUND, NOT_PARTICIPANT
        """
        if not Chat.objects.filter(pk=chat_id).exists():
            return _chat_not_found(chat_id)
        if not _is_participant(chat_id, user.pk):
            return ServiceResult.failure(
                "You are not a participant in this chat",
                error_code="NOT_PARTICIPANT",
                error_kind=ErrorKind.ACCESS_DENIED,
            )

        last_read_at = (
            ReadCursor.objects.filter(chat_id=chat_id, user=user)
            .values_list("last_read_at", flat=True)
            .first()
        )
        return ServiceResult.success(cls.count_unread(chat_id, user, last_read_at))

    @classmethod
    def count_unread(
        cls,
        chat_id: int,
        user: User,
        last_read_at: datetime | None,
    ) -> int:
        """
        COUNT of messages after last_read_at not sent by the user.

        Messages whose sender was deleted count as unread for everyone.
        With no cursor, every message from others is unread.
        """
        messages = Message.objects.filter(chat_id=chat_id).exclude(sender=user)
        if last_read_at is not None:
            messages = messages.filter(created_at__gt=last_read_at)
        return messages.count()
