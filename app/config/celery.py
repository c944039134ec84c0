"""
Celery configuration for the ChatGroove store.

Celery runs the periodic housekeeping jobs (marking idle users offline).
Redis is both broker and result backend. Tasks are auto-discovered from
all installed Django apps; schedules live in the database via
django-celery-beat.

Usage:
    from celery import shared_task

    @shared_task
    def mark_idle_users_offline():
        ...

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

app.autodiscover_tasks()
