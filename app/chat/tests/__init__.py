"""
Tests for chat app.

This package contains test modules for:
- test_models.py: Chat, DirectChatPair, Message constraint tests
- test_services.py: ChatService, ParticipantService, MessageService, ReadTrackerService
- test_views.py: REST API endpoint tests
- test_permissions.py: IsNotBanned
- test_commands.py: seed_global_rooms

Usage:
    pytest chat/tests/
    pytest chat/tests/test_services.py
"""
