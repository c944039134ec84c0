"""
Tests for chat permission classes.

IsNotBanned gates every chat endpoint on the caller's moderation state.
"""

from unittest.mock import Mock

from django.contrib.auth.models import AnonymousUser

from authentication.tests.factories import UserFactory
from chat.permissions import IsNotBanned


def _request_for(user):
    request = Mock()
    request.user = user
    return request


class TestIsNotBanned:
    def test_allows_regular_user(self, db):
        assert IsNotBanned().has_permission(_request_for(UserFactory()), None) is True

    def test_allows_restricted_user(self, db):
        """
        Restricted users keep read access.

        Why it matters: Restriction only blocks writes, which the services
        enforce with USER_RESTRICTED.
        """
        request = _request_for(UserFactory(restricted=True))

        assert IsNotBanned().has_permission(request, None) is True

    def test_denies_banned_user(self, db):
        request = _request_for(UserFactory(banned=True))

        assert IsNotBanned().has_permission(request, None) is False

    def test_denies_anonymous(self):
        assert IsNotBanned().has_permission(_request_for(AnonymousUser()), None) is False
