"""
Moderation application.

Admin-only tooling for banning and restricting users, changing roles and
removing chats, messages and accounts.
"""
