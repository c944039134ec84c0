"""
Test configuration and fixtures for account directory tests.

Usage:
    def test_example(user, authenticated_client):
        response = authenticated_client.get("/api/v1/accounts/me/")
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import AdminFactory, UserFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create a basic user."""
    return UserFactory(email="sam@example.com", display_name="Sam Carter")


@pytest.fixture
def other_user(db):
    """Create a second user."""
    return UserFactory(email="alex@example.com", display_name="Alex Stone")


@pytest.fixture
def admin_user(db):
    """Create a user with the admin role."""
    return AdminFactory(email="admin@example.com", display_name="Admin")


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    return APIClient()


@pytest.fixture
def authenticated_client(user):
    """API client authenticated with a JWT for the default user fixture."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client
