"""
Permission classes for the moderation API.
"""

from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """
    Allow only authenticated users holding the admin role.

    Django's is_staff flag is unrelated; the role field is the source of
    truth for the API.
    """

    message = "Admin role required."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_admin
