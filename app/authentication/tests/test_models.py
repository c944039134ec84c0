"""
Tests for the User model.

These tests verify:
- Role helpers (is_admin, is_moderator)
- Moderation helpers (is_banned, is_restricted)
- Display name fallbacks
"""

from authentication.models import User
from authentication.tests.factories import AdminFactory, ModeratorFactory, UserFactory


class TestUserRoles:
    """Test role helper properties."""

    def test_plain_user_is_neither_admin_nor_moderator(self, db):
        user = UserFactory()

        assert user.is_admin is False
        assert user.is_moderator is False

    def test_moderator_is_not_admin(self, db):
        moderator = ModeratorFactory()

        assert moderator.is_moderator is True
        assert moderator.is_admin is False

    def test_admin_counts_as_moderator(self, db):
        """
        Admins hold every moderator capability.

        Why it matters: Message deletion checks is_moderator, and admins
        must be able to delete any message too.
        """
        admin = AdminFactory()

        assert admin.is_admin is True
        assert admin.is_moderator is True


class TestUserModerationState:
    """Test moderation helper properties."""

    def test_banned_trait(self, db):
        user = UserFactory(banned=True)

        assert user.is_banned is True
        assert user.is_restricted is False
        assert user.moderated_at is not None

    def test_restricted_trait(self, db):
        user = UserFactory(restricted=True)

        assert user.is_restricted is True
        assert user.is_banned is False


class TestUserNames:
    """Test display name fallbacks."""

    def test_full_name_uses_display_name(self, db):
        user = UserFactory(display_name="Robin")

        assert user.get_full_name() == "Robin"
        assert str(user) == user.email

    def test_short_name_falls_back_to_email_local_part(self, db):
        user = User.objects.create_user(email="robin@example.com")

        assert user.get_short_name() == "robin"
