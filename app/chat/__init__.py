"""
Chat app for persistent messaging.

This app handles:
- Chats (direct, group and global rooms)
- Membership (join, leave, add, remove)
- Message history with stable paging
- Read cursors and unread counts

Related apps:
    - authentication: User model for participants and senders
    - moderation: Admin deletes of chats, messages and users

Usage:
    from chat.services import ChatService, MessageService

    # Start or reopen a direct chat
    chat = ChatService.get_or_create_direct_chat(user, other_user).data

    # Send message
    message = MessageService.append(chat.id, user, content="Hello!").data
"""
