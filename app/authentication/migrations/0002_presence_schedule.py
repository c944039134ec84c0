"""
Add the Celery Beat schedule for presence cleanup.

Creates a periodic task that marks users with stale heartbeats offline.
"""

from django.db import migrations


def create_periodic_tasks(apps, schema_editor):
    """Create the presence cleanup periodic task."""
    IntervalSchedule = apps.get_model("django_celery_beat", "IntervalSchedule")
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")

    schedule_1min, _ = IntervalSchedule.objects.get_or_create(
        every=1,
        period="minutes",
    )

    PeriodicTask.objects.get_or_create(
        name="Accounts: Mark Idle Users Offline",
        defaults={
            "task": "authentication.tasks.mark_idle_users_offline",
            "interval": schedule_1min,
            "enabled": True,
            "description": (
                "Marks online users whose last heartbeat is older than "
                "PRESENCE_CONFIG.IDLE_TIMEOUT_SECONDS as offline."
            ),
        },
    )


def remove_periodic_tasks(apps, schema_editor):
    """Remove the presence cleanup periodic task."""
    PeriodicTask = apps.get_model("django_celery_beat", "PeriodicTask")
    PeriodicTask.objects.filter(name="Accounts: Mark Idle Users Offline").delete()


class Migration(migrations.Migration):

    dependencies = [
        ("authentication", "0001_initial"),
        ("django_celery_beat", "0019_alter_periodictasks_options"),
    ]

    operations = [
        migrations.RunPython(create_periodic_tasks, remove_periodic_tasks),
    ]
