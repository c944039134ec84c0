"""
Tests for the account directory.

This package contains test modules for:
- test_models.py: User role and moderation properties
- test_managers.py: UserManager
- test_services.py: AccountService tests
- test_views.py: API endpoint tests
- test_tasks.py: Celery task tests

Usage:
    pytest authentication/tests/
"""
