"""
Serializers for the moderation API.

Serializers:
    - ModerationActionSerializer: Optional reason for ban/restrict
    - RoleSerializer: Role change request
    - AdminUserSerializer: Full user record for admins
    - AdminChatSerializer / AdminMessageSerializer: Admin listings
    - StatsSerializer: Dashboard counts
"""

from rest_framework import serializers

from authentication.models import User
from chat.models import Chat, Message
from chat.serializers import sender_display_name


class ModerationActionSerializer(serializers.Serializer):
    reason = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=1000
    )


class RoleSerializer(serializers.Serializer):
    # Validated by the service so unknown roles report INVALID_ROLE
    role = serializers.CharField()


class AdminUserSerializer(serializers.ModelSerializer):
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


class AdminChatSerializer(serializers.ModelSerializer):
    created_by_id = serializers.UUIDField(read_only=True, allow_null=True)
    participant_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Chat
        fields = [
            "id",
            "kind",
            "name",
            "visibility",
            "member_cap",
            "created_by_id",
            "participant_count",
            "last_message_at",
            "created_at",
        ]
        read_only_fields = fields


class AdminMessageSerializer(serializers.ModelSerializer):
    chat_id = serializers.IntegerField(read_only=True)
    sender_id = serializers.UUIDField(read_only=True, allow_null=True)
    sender_name = serializers.SerializerMethodField()

    class Meta:
        model = Message
        fields = [
            "id",
            "chat_id",
            "sender_id",
            "sender_name",
            "content",
            "message_type",
            "media_url",
            "edited_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_sender_name(self, obj) -> str:
        return sender_display_name(obj)


class StatsSerializer(serializers.Serializer):
    total_users = serializers.IntegerField()
    online_users = serializers.IntegerField()
    total_chats = serializers.IntegerField()
    total_messages = serializers.IntegerField()
