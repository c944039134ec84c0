"""
Tests for account directory celery tasks.
"""

from datetime import timedelta

from django.utils import timezone

from authentication.tasks import mark_idle_users_offline
from authentication.tests.factories import UserFactory


class TestMarkIdleUsersOfflineTask:
    """Tests for the mark_idle_users_offline task."""

    def test_task_delegates_to_service(self, db):
        """
        Running the task eagerly flips stale users offline.

        Why it matters: Presence would otherwise stay "online" forever
        for clients that disappear without a final status update.
        """
        stale = UserFactory(
            is_online=True, last_seen=timezone.now() - timedelta(hours=1)
        )

        result = mark_idle_users_offline.apply()

        stale.refresh_from_db()
        assert result.get() == 1
        assert stale.is_online is False
