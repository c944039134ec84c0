"""
Tests for moderation permission classes.
"""

from unittest.mock import Mock

from django.contrib.auth.models import AnonymousUser

from authentication.tests.factories import AdminFactory, ModeratorFactory, UserFactory
from moderation.permissions import IsAdminRole


def _request_for(user):
    request = Mock()
    request.user = user
    return request


class TestIsAdminRole:
    def test_allows_admin(self, db):
        assert IsAdminRole().has_permission(_request_for(AdminFactory()), None) is True

    def test_denies_moderator(self, db):
        assert IsAdminRole().has_permission(_request_for(ModeratorFactory()), None) is False

    def test_ignores_is_staff(self, db):
        """
        Only the role field counts.

        Why it matters: Django admin staff access and API admin rights are
        managed separately.
        """
        user = UserFactory(is_staff=True)

        assert IsAdminRole().has_permission(_request_for(user), None) is False

    def test_denies_anonymous(self):
        assert IsAdminRole().has_permission(_request_for(AnonymousUser()), None) is False
