"""
Serializers for the account directory.

Serializers:
    - UserSerializer: Public user representation (chat participants, search)
    - CurrentUserSerializer: The caller's own record, including moderation state
    - OnlineStatusSerializer: Presence update request
"""

from rest_framework import serializers

from authentication.models import User


class UserSerializer(serializers.ModelSerializer):
    """Public representation of a user, embedded in chat payloads."""

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "display_name",
            "role",
            "is_online",
            "last_seen",
        ]
        read_only_fields = fields


class CurrentUserSerializer(serializers.ModelSerializer):
    """The authenticated user's own record."""

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "display_name",
            "role",
            "moderation_status",
            "moderation_reason",
            "moderated_at",
            "is_online",
            "last_seen",
            "date_joined",
        ]
        read_only_fields = fields


class OnlineStatusSerializer(serializers.Serializer):
    """Request body for presence updates."""

    is_online = serializers.BooleanField()
