"""
Constants and configuration for the chat module.

This module centralizes configuration values for:
- Chat membership (member caps, name limits)
- Message operations (content limits, page sizes)
- Global rooms created by the bootstrap step

Import example:
    from chat.constants import CHAT_CONFIG, MESSAGE_CONFIG, DEFAULT_GLOBAL_ROOMS
"""

from typing import Final


# =============================================================================
# Chat Configuration
# =============================================================================


class CHAT_CONFIG:
    """Configuration for chats and membership."""

    # Caps
    DIRECT_MEMBER_CAP: Final[int] = 2
    DEFAULT_MEMBER_CAP: Final[int] = 1000  # Group and global chats
    MAX_MEMBER_CAP: Final[int] = 10000

    # Names
    MAX_NAME_LENGTH: Final[int] = 100


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    # Content limits
    MAX_CONTENT_LENGTH: Final[int] = 10000  # Characters

    # History pages
    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 100


# =============================================================================
# Global Rooms
# =============================================================================

# Public rooms created by `manage.py seed_global_rooms`
DEFAULT_GLOBAL_ROOMS: Final[tuple] = (
    {
        "name": "General Chat",
        "description": "Welcome to the main chat room! Talk about anything and everything.",
        "category": "General",
    },
    {
        "name": "Gaming Hub",
        "description": "Discuss your favorite games, share tips, and find gaming buddies.",
        "category": "Gaming",
    },
    {
        "name": "Music Lounge",
        "description": "Share music, discuss artists, and discover new sounds.",
        "category": "Music",
    },
    {
        "name": "Tech Talk",
        "description": "Everything about technology, programming, and innovation.",
        "category": "Technology",
    },
    {
        "name": "Creative Corner",
        "description": "Share your art, writing, and creative projects.",
        "category": "Creative",
    },
    {
        "name": "Food & Travel",
        "description": "Share recipes, restaurant finds, and travel stories.",
        "category": "Food & Travel",
    },
)
