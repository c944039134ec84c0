"""
Permission classes for chat API.

This module provides DRF permission classes for the chat system:
- IsNotBanned: Banned users are refused on every chat endpoint

Design Decisions:
    - Membership and ownership are checked by the services, which return
      ACCESS_DENIED failures; permission classes only gate on the account
    - Restricted users pass (they may still read); the services refuse
      their writes with USER_RESTRICTED
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class IsNotBanned(permissions.BasePermission):
    """Allows access only to users who are not banned."""

    message = "Your account is banned."

    def has_permission(self, request: Request, view: APIView) -> bool:
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return not user.is_banned
