"""
Create the default global rooms.

Usage:
    python manage.py seed_global_rooms

Safe to run on every deploy: rooms that already exist are skipped.
"""

from django.core.management.base import BaseCommand, CommandError

from chat.services import ChatService


class Command(BaseCommand):
    help = "Create the default public global chat rooms"

    def handle(self, *args, **options):
        result = ChatService.bootstrap_global_rooms()
        if not result.success:
            raise CommandError(result.error)

        if not result.data:
            self.stdout.write("Global rooms already exist")
            return
        for chat in result.data:
            self.stdout.write(self.style.SUCCESS(f"Created global room '{chat.name}'"))
