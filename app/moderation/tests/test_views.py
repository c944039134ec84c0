"""
Tests for moderation API views.

Endpoints:
    /api/v1/moderation/...
"""

from rest_framework.test import APIClient

from authentication.models import User
from authentication.tests.factories import UserFactory
from chat.models import Chat, Message
from chat.tests.factories import GroupChatFactory, MessageFactory

BASE_URL = "/api/v1/moderation/"


def user_url(user_id, suffix=""):
    return f"{BASE_URL}users/{user_id}/{suffix}"


class TestAccess:
    def test_requires_authentication(self, db):
        assert APIClient().get(f"{BASE_URL}stats/").status_code == 401

    def test_moderator_forbidden(self, moderator_client):
        assert moderator_client.get(f"{BASE_URL}stats/").status_code == 403


class TestStats:
    def test_returns_counts(self, admin_client, admin):
        MessageFactory()

        response = admin_client.get(f"{BASE_URL}stats/")

        assert response.status_code == 200
        assert response.data["total_chats"] == 1
        assert response.data["total_messages"] == 1
        assert response.data["total_users"] == User.objects.count()


class TestUsers:
    def test_list_is_paginated(self, admin_client, target):
        UserFactory.create_batch(3)

        response = admin_client.get(f"{BASE_URL}users/", {"page_size": 2})

        assert response.status_code == 200
        assert response.data["count"] == User.objects.count()
        assert len(response.data["results"]) == 2
        assert response.data["next"] is not None

    def test_ban_and_unban(self, admin_client, target):
        banned = admin_client.post(
            user_url(target.pk, "ban/"), {"reason": "Spam"}, format="json"
        )
        unbanned = admin_client.post(user_url(target.pk, "unban/"))

        assert banned.status_code == 200
        assert banned.data["moderation_status"] == User.ModerationStatus.BANNED
        assert banned.data["moderation_reason"] == "Spam"
        assert unbanned.status_code == 200
        assert unbanned.data["moderation_status"] == User.ModerationStatus.NONE

    def test_restrict_without_body(self, admin_client, target):
        response = admin_client.post(user_url(target.pk, "restrict/"), {}, format="json")

        assert response.status_code == 200
        assert response.data["moderation_reason"] == "No reason provided"

    def test_unrestrict_when_not_restricted(self, admin_client, target):
        response = admin_client.post(user_url(target.pk, "unrestrict/"))

        assert response.status_code == 400
        assert response.data["error_code"] == "INVALID_MODERATION_STATE"

    def test_set_role(self, admin_client, target):
        response = admin_client.post(
            user_url(target.pk, "role/"), {"role": "moderator"}, format="json"
        )

        assert response.status_code == 200
        assert response.data["role"] == "moderator"

    def test_set_invalid_role(self, admin_client, target):
        response = admin_client.post(
            user_url(target.pk, "role/"), {"role": "overlord"}, format="json"
        )

        assert response.status_code == 400
        assert response.data["error_code"] == "INVALID_ROLE"

    def test_delete_user(self, admin_client, target):
        response = admin_client.delete(user_url(target.pk))

        assert response.status_code == 204
        assert not User.objects.filter(pk=target.pk).exists()

    def test_unknown_user(self, admin_client):
        response = admin_client.post(
            user_url("00000000-0000-0000-0000-000000000000", "ban/")
        )

        assert response.status_code == 404


class TestChats:
    def test_list_and_delete(self, admin_client):
        chat = GroupChatFactory()

        listing = admin_client.get(f"{BASE_URL}chats/")
        deleted = admin_client.delete(f"{BASE_URL}chats/{chat.pk}/")

        assert listing.data["results"][0]["id"] == chat.pk
        assert listing.data["results"][0]["participant_count"] == 1
        assert deleted.status_code == 204
        assert not Chat.objects.filter(pk=chat.pk).exists()

    def test_delete_unknown(self, admin_client):
        assert admin_client.delete(f"{BASE_URL}chats/999999/").status_code == 404


class TestMessages:
    def test_list_filtered_and_delete(self, admin_client):
        message = MessageFactory()
        MessageFactory()

        listing = admin_client.get(
            f"{BASE_URL}messages/", {"chat_id": message.chat_id}
        )
        deleted = admin_client.delete(f"{BASE_URL}messages/{message.pk}/")

        assert [m["id"] for m in listing.data["results"]] == [message.pk]
        assert deleted.status_code == 204
        assert not Message.objects.filter(pk=message.pk).exists()

    def test_invalid_chat_filter(self, admin_client):
        response = admin_client.get(f"{BASE_URL}messages/", {"chat_id": "abc"})

        assert response.status_code == 400
