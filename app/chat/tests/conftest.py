"""
Test configuration and fixtures for chat tests.

This module provides:
- User fixtures (creator, member, outsider, moderator)
- Chat fixtures (group, direct, global room)
- API client helpers for authenticated requests

Usage:
    def test_example(group_chat, creator_client):
        response = creator_client.get(f"/api/v1/chat/chats/{group_chat.id}/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import ModeratorFactory, UserFactory
from chat.models import Participant
from chat.services import ChatService
from chat.tests.factories import GlobalRoomFactory, GroupChatFactory


def _client_for(user) -> APIClient:
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def creator(db):
    """User who creates the group chat fixture."""
    return UserFactory(display_name="Casey Creator")


@pytest.fixture
def member(db):
    """User who participates in the group chat fixture."""
    return UserFactory(display_name="Morgan Member")


@pytest.fixture
def outsider(db):
    """User who is not a participant in any fixture chat."""
    return UserFactory(display_name="Olive Outsider")


@pytest.fixture
def moderator(db):
    return ModeratorFactory(display_name="Mod Squad")


# =============================================================================
# Chat Fixtures
# =============================================================================


@pytest.fixture
def group_chat(db, creator, member):
    """Private group chat with creator and member as participants."""
    chat = GroupChatFactory(created_by=creator, name="Project Team")
    Participant.objects.create(chat=chat, user=member)
    return chat


@pytest.fixture
def direct_chat(db, creator, member):
    """Direct chat between creator and member."""
    return ChatService.get_or_create_direct_chat(creator, member).data


@pytest.fixture
def global_room(db):
    """Global room nobody has joined yet."""
    return GlobalRoomFactory(name="General Chat")


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def creator_client(creator):
    return _client_for(creator)


@pytest.fixture
def member_client(member):
    return _client_for(member)


@pytest.fixture
def outsider_client(outsider):
    return _client_for(outsider)


@pytest.fixture
def moderator_client(moderator):
    return _client_for(moderator)
