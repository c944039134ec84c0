"""
Tests for chat API views.

Endpoints:
    /api/v1/chat/chats/...

Focus:
    - Status code mapping of service failures
    - Response shapes clients rely on
    - Banned users refused everywhere
"""

import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from authentication.tests.factories import UserFactory
from chat.models import Chat, ChatKind, Message, Participant
from chat.services import MessageService

CHATS_URL = "/api/v1/chat/chats/"


def chat_url(chat_id, suffix=""):
    return f"{CHATS_URL}{chat_id}/{suffix}"


# =============================================================================
# Chats
# =============================================================================


class TestChatList:
    def test_lists_my_chats_with_unread(self, member_client, group_chat, creator):
        MessageService.append(group_chat.pk, creator, content="hello")

        response = member_client.get(CHATS_URL)

        assert response.status_code == 200
        assert len(response.data) == 1
        entry = response.data[0]
        assert entry["id"] == group_chat.pk
        assert entry["display_name"] == "Project Team"
        assert entry["unread_count"] == 1
        assert entry["last_message"]["content"] == "hello"
        assert len(entry["participants"]) == 2

    def test_direct_chat_display_name_is_other_user(self, member_client, direct_chat, creator):
        response = member_client.get(CHATS_URL)

        assert response.data[0]["display_name"] == creator.display_name

    def test_requires_authentication(self, db):
        assert APIClient().get(CHATS_URL).status_code == 401


class TestChatCreate:
    def test_creates_group(self, creator_client, creator, member):
        response = creator_client.post(
            CHATS_URL,
            {"name": "Team", "member_ids": [str(member.pk)]},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["kind"] == ChatKind.GROUP
        assert {p["user"]["id"] for p in response.data["participants"]} == {
            str(creator.pk),
            str(member.pk),
        }

    def test_missing_name(self, creator_client):
        response = creator_client.post(CHATS_URL, {}, format="json")

        assert response.status_code == 400
        assert response.data["error_code"] == "NAME_REQUIRED"

    def test_direct_kind_rejected(self, creator_client):
        response = creator_client.post(
            CHATS_URL, {"kind": "direct", "name": "x"}, format="json"
        )

        assert response.status_code == 400
        assert response.data["error_code"] == "INVALID_CHAT_KIND"

    def test_unknown_member(self, creator_client):
        response = creator_client.post(
            CHATS_URL,
            {"name": "Team", "member_ids": ["00000000-0000-0000-0000-000000000000"]},
            format="json",
        )

        assert response.status_code == 404
        assert response.data["error_code"] == "USER_NOT_FOUND"


class TestDirectChat:
    def test_get_or_create(self, creator_client, member):
        first = creator_client.post(
            f"{CHATS_URL}direct/", {"user_id": str(member.pk)}, format="json"
        )
        second = creator_client.post(
            f"{CHATS_URL}direct/", {"user_id": str(member.pk)}, format="json"
        )

        assert first.status_code == 200
        assert first.data["id"] == second.data["id"]
        assert Chat.objects.filter(kind=ChatKind.DIRECT).count() == 1

    def test_with_self(self, creator_client, creator):
        response = creator_client.post(
            f"{CHATS_URL}direct/", {"user_id": str(creator.pk)}, format="json"
        )

        assert response.status_code == 400
        assert response.data["error_code"] == "SAME_USER"


class TestChatDetail:
    def test_participant_sees_detail(self, member_client, group_chat):
        response = member_client.get(chat_url(group_chat.pk))

        assert response.status_code == 200
        assert response.data["name"] == "Project Team"

    def test_outsider_gets_403(self, outsider_client, group_chat):
        response = outsider_client.get(chat_url(group_chat.pk))

        assert response.status_code == 403
        assert response.data["error_code"] == "ACCESS_DENIED"

    def test_unknown_chat_gets_404(self, outsider_client):
        response = outsider_client.get(chat_url(999999))

        assert response.status_code == 404


class TestGlobalRooms:
    def test_browse_and_join(self, outsider_client, outsider, global_room):
        listing = outsider_client.get(f"{CHATS_URL}global/")
        joined = outsider_client.post(chat_url(global_room.pk, "join/"))
        relisting = outsider_client.get(f"{CHATS_URL}global/")

        assert listing.status_code == 200
        assert listing.data[0]["is_member"] is False
        assert joined.status_code == 200
        assert relisting.data[0]["is_member"] is True
        assert relisting.data[0]["participant_count"] == 1


# =============================================================================
# Participants
# =============================================================================


class TestParticipants:
    def test_add_participant(self, creator_client, group_chat, outsider):
        response = creator_client.post(
            chat_url(group_chat.pk, "participants/"),
            {"user_id": str(outsider.pk)},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["user"]["id"] == str(outsider.pk)

    def test_add_to_direct_chat_rejected(self, creator_client, direct_chat, outsider):
        response = creator_client.post(
            chat_url(direct_chat.pk, "participants/"),
            {"user_id": str(outsider.pk)},
            format="json",
        )

        assert response.status_code == 400
        assert response.data["error_code"] == "DIRECT_CHAT_MEMBERSHIP"

    def test_creator_removes_member(self, creator_client, group_chat, member):
        response = creator_client.delete(
            chat_url(group_chat.pk, f"participants/{member.pk}/")
        )

        assert response.status_code == 204
        assert not Participant.objects.filter(chat=group_chat, user=member).exists()

    def test_member_cannot_remove_creator(self, member_client, group_chat, creator):
        response = member_client.delete(
            chat_url(group_chat.pk, f"participants/{creator.pk}/")
        )

        assert response.status_code == 403

    def test_leave(self, member_client, group_chat, member):
        response = member_client.post(chat_url(group_chat.pk, "leave/"))

        assert response.status_code == 200
        assert response.data["status"] == "left"


# =============================================================================
# Messages
# =============================================================================


class TestMessages:
    def test_send_and_list(self, member_client, group_chat):
        sent = member_client.post(
            chat_url(group_chat.pk, "messages/"), {"content": "hello"}, format="json"
        )
        listing = member_client.get(chat_url(group_chat.pk, "messages/"))

        assert sent.status_code == 201
        assert sent.data["content"] == "hello"
        assert listing.status_code == 200
        assert [m["id"] for m in listing.data["messages"]] == [sent.data["id"]]
        assert listing.data["has_more"] is False
        assert listing.data["next_before"] is None

    def test_send_requires_content(self, member_client, group_chat):
        response = member_client.post(
            chat_url(group_chat.pk, "messages/"), {"content": ""}, format="json"
        )

        assert response.status_code == 400
        assert response.data["error_code"] == "CONTENT_REQUIRED"

    def test_outsider_cannot_send(self, outsider_client, group_chat):
        response = outsider_client.post(
            chat_url(group_chat.pk, "messages/"), {"content": "hi"}, format="json"
        )

        assert response.status_code == 403

    def test_paging_params(self, member_client, group_chat, creator):
        ids = [
            MessageService.append(group_chat.pk, creator, content=str(i)).data.pk
            for i in range(5)
        ]

        response = member_client.get(
            chat_url(group_chat.pk, "messages/"), {"limit": 2, "before": ids[4]}
        )

        assert [m["id"] for m in response.data["messages"]] == ids[2:4]
        assert response.data["has_more"] is True
        assert response.data["next_before"] == ids[2]

    def test_reply_to_deleted_message(self, member_client, group_chat, creator, member):
        original = MessageService.append(group_chat.pk, creator, content="q").data
        MessageService.append(group_chat.pk, member, content="a", reply_to_id=original.pk)
        MessageService.delete(original.pk, creator)

        response = member_client.get(chat_url(group_chat.pk, "messages/"))

        assert response.data["messages"][0]["reply_to"] == {
            "id": original.pk,
            "available": False,
        }

    def test_deleted_sender_renders_placeholder(self, member_client, group_chat, creator):
        MessageService.append(group_chat.pk, creator, content="bye")
        Message.objects.filter(chat=group_chat).update(sender=None)

        response = member_client.get(chat_url(group_chat.pk, "messages/"))

        assert response.data["messages"][0]["sender"] is None
        assert response.data["messages"][0]["sender_name"] == "Deleted user"

    def test_edit_and_delete(self, member_client, group_chat, member):
        message = MessageService.append(group_chat.pk, member, content="tpyo").data
        url = chat_url(group_chat.pk, f"messages/{message.pk}/")

        edited = member_client.patch(url, {"content": "typo"}, format="json")
        deleted = member_client.delete(url)

        assert edited.status_code == 200
        assert edited.data["content"] == "typo"
        assert edited.data["edited_at"] is not None
        assert deleted.status_code == 204
        assert not Message.objects.filter(pk=message.pk).exists()

    def test_edit_by_other_user(self, creator_client, group_chat, member):
        message = MessageService.append(group_chat.pk, member, content="mine").data

        response = creator_client.patch(
            chat_url(group_chat.pk, f"messages/{message.pk}/"),
            {"content": "x"},
            format="json",
        )

        assert response.status_code == 403
        assert response.data["error_code"] == "NOT_OWNER"


# =============================================================================
# Read tracking
# =============================================================================


class TestReadTracking:
    def test_mark_read_and_count(self, member_client, group_chat, creator):
        MessageService.append(group_chat.pk, creator, content="one")
        MessageService.append(group_chat.pk, creator, content="two")

        before = member_client.get(chat_url(group_chat.pk, "unread/"))
        marked = member_client.post(chat_url(group_chat.pk, "read/"), {}, format="json")
        after = member_client.get(chat_url(group_chat.pk, "unread/"))

        assert before.data == {"chat_id": group_chat.pk, "unread_count": 2}
        assert marked.status_code == 200
        assert after.data["unread_count"] == 0

    def test_mark_read_unknown_message(self, member_client, group_chat):
        response = member_client.post(
            chat_url(group_chat.pk, "read/"), {"message_id": 999999}, format="json"
        )

        assert response.status_code == 404


# =============================================================================
# Banned users
# =============================================================================


class TestBannedUser:
    @pytest.fixture
    def banned_client(self, db):
        client = APIClient()
        token = RefreshToken.for_user(UserFactory(banned=True)).access_token
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return client

    @pytest.mark.parametrize(
        "method,path",
        [
            ("get", CHATS_URL),
            ("get", f"{CHATS_URL}global/"),
            ("post", f"{CHATS_URL}direct/"),
        ],
    )
    def test_refused(self, banned_client, method, path):
        response = getattr(banned_client, method)(path, {}, format="json")

        assert response.status_code == 403
