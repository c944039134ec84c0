"""
Test configuration and fixtures for moderation tests.
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import AdminFactory, ModeratorFactory, UserFactory


def _client_for(user) -> APIClient:
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def admin(db):
    return AdminFactory(display_name="Ada Admin")


@pytest.fixture
def moderator(db):
    """Moderators can delete messages in chat but cannot use the admin API."""
    return ModeratorFactory(display_name="Mod Squad")


@pytest.fixture
def target(db):
    """Regular user the moderation actions are applied to."""
    return UserFactory(email="target@example.com", display_name="Terry Target")


@pytest.fixture
def admin_client(admin):
    return _client_for(admin)


@pytest.fixture
def moderator_client(moderator):
    return _client_for(moderator)
