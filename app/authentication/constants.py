"""
Constants for the account directory.

Import example:
    from authentication.constants import PRESENCE_CONFIG
"""

from typing import Final


class PRESENCE_CONFIG:
    """Configuration for presence tracking."""

    # Online users with no heartbeat for this long are marked offline
    IDLE_TIMEOUT_SECONDS: Final[int] = 300

    # How often clients should send a heartbeat
    HEARTBEAT_INTERVAL_SECONDS: Final[int] = 60


class SEARCH_CONFIG:
    """Configuration for user search."""

    MIN_QUERY_LENGTH: Final[int] = 2
    MAX_RESULTS: Final[int] = 20
