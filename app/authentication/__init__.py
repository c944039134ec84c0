"""
Account directory application.

This app holds the user records the chat store references: profile,
presence, role and moderation state. Tokens come from the external
identity provider; this app only verifies them.

Key components:
    - User model: Email-keyed user with role and moderation state
    - AccountService: Provisioning, presence and user search

Usage:
    from authentication.models import User
    from authentication.services import AccountService
"""
