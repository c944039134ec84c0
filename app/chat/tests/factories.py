"""
Factory Boy factories for chat models.

Provides test data generation for:
- Chat: Group, direct and global chats
- Participant: User membership in chats
- Message: Text and media messages
- ReadCursor: Read positions

Usage:
    from chat.tests.factories import (
        GroupChatFactory,
        GlobalRoomFactory,
        ParticipantFactory,
        MessageFactory,
    )

    # Group with a creator (who is also a participant)
    chat = GroupChatFactory()

    # Message in a chat
    message = MessageFactory(chat=chat, sender=user)

Direct chats should be created through
ChatService.get_or_create_direct_chat so the pair row and both
participants exist.
"""

import factory
from django.utils import timezone

from authentication.tests.factories import UserFactory
from chat.models import (
    Chat,
    ChatKind,
    ChatVisibility,
    Message,
    MessageType,
    Participant,
    ReadCursor,
)


class ChatFactory(factory.django.DjangoModelFactory):
    """
    Base factory for Chat model.

    Creates a private group chat without participants.
    """

    class Meta:
        model = Chat
        skip_postgeneration_save = True

    kind = ChatKind.GROUP
    name = factory.Sequence(lambda n: f"Group {n}")
    visibility = ChatVisibility.PRIVATE
    member_cap = 1000
    created_by = factory.SubFactory(UserFactory)


class GroupChatFactory(ChatFactory):
    """
    Group chat whose creator is its first participant.

    Examples:
        chat = GroupChatFactory()
        chat = GroupChatFactory(member_cap=3)
    """

    @factory.post_generation
    def creator_participant(self, create, extracted, **kwargs):
        if create and self.created_by is not None:
            Participant.objects.create(chat=self, user=self.created_by)


class GlobalRoomFactory(ChatFactory):
    """Public global room with no creator."""

    kind = ChatKind.GLOBAL
    name = factory.Sequence(lambda n: f"Room {n}")
    visibility = ChatVisibility.PUBLIC
    created_by = None


class ParticipantFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Participant

    chat = factory.SubFactory(GroupChatFactory)
    user = factory.SubFactory(UserFactory)


class MessageFactory(factory.django.DjangoModelFactory):
    """
    Factory for Message model.

    Writes rows directly; use MessageService.append when the chat's
    last_message_at bookkeeping matters.
    """

    class Meta:
        model = Message

    chat = factory.SubFactory(GroupChatFactory)
    sender = factory.SubFactory(UserFactory)
    content = factory.Faker("sentence")
    message_type = MessageType.TEXT
    created_at = factory.LazyFunction(timezone.now)

    class Params:
        image = factory.Trait(
            message_type=MessageType.IMAGE,
            content=None,
            media_url="https://media.example.com/photo.jpg",
            media_filename="photo.jpg",
        )


class ReadCursorFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ReadCursor

    chat = factory.SubFactory(GroupChatFactory)
    user = factory.SubFactory(UserFactory)
    last_read_at = factory.LazyFunction(timezone.now)
