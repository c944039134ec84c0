"""
Celery tasks for the account directory.

This module defines periodic tasks for:
- Marking users with stale heartbeats as offline

The schedule is stored in django-celery-beat (see migration
0002_presence_schedule).

Usage:
    from authentication.tasks import mark_idle_users_offline
    mark_idle_users_offline.delay()
"""

import logging

from celery import shared_task
from django.db import InterfaceError, OperationalError

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(OperationalError, InterfaceError),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def mark_idle_users_offline(self) -> int:
    """
    Flip is_online off for users whose last heartbeat is too old.

    Returns:
        Number of users marked offline
    """
    from authentication.services import AccountService

    count = AccountService.mark_idle_users_offline()
    logger.info(f"mark_idle_users_offline: {count} users updated")
    return count
