"""
ViewSets for chat API.

This module provides REST API endpoints for the chat system:
- ChatViewSet: Chats, membership, messages and read tracking

URL Structure:
    /api/v1/chat/chats/                                     GET, POST
    /api/v1/chat/chats/direct/                              POST
    /api/v1/chat/chats/global/                              GET
    /api/v1/chat/chats/{id}/                                GET
    /api/v1/chat/chats/{id}/join/                           POST
    /api/v1/chat/chats/{id}/leave/                          POST
    /api/v1/chat/chats/{id}/participants/                   POST
    /api/v1/chat/chats/{id}/participants/{user_id}/         DELETE
    /api/v1/chat/chats/{id}/read/                           POST
    /api/v1/chat/chats/{id}/unread/                         GET
    /api/v1/chat/chats/{id}/messages/                       GET, POST
    /api/v1/chat/chats/{id}/messages/{message_id}/          PATCH, DELETE

Design Decisions:
    - All operations go through the service layer
    - Failed ServiceResults are mapped to HTTP by failure_response
    - Banned users are refused up front by IsNotBanned
    - Message history pages by message id (`before`), not DRF pagination,
      so a page boundary is stable while new messages arrive
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import (
    OpenApiParameter,
    OpenApiResponse,
    extend_schema,
    extend_schema_view,
)
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from chat.permissions import IsNotBanned
from chat.serializers import (
    ChatCreateSerializer,
    ChatDetailSerializer,
    ChatSummarySerializer,
    DirectChatCreateSerializer,
    GlobalRoomSerializer,
    MarkReadSerializer,
    MessageCreateSerializer,
    MessageEditSerializer,
    MessageListQuerySerializer,
    MessagePageSerializer,
    MessageSerializer,
    ParticipantCreateSerializer,
    ParticipantSerializer,
    ReadCursorSerializer,
    UnreadCountSerializer,
)
from chat.services import (
    ChatService,
    MessageService,
    ParticipantService,
    ReadTrackerService,
)
from core.services import ErrorKind, ServiceResult
from core.views import failure_response

User = get_user_model()


def _user_not_found(user_id) -> ServiceResult:
    return ServiceResult.failure(
        f"User {user_id} not found",
        error_code="USER_NOT_FOUND",
        error_kind=ErrorKind.NOT_FOUND,
    )


def _active_user(user_id):
    return User.objects.filter(pk=user_id, is_active=True).first()


@extend_schema_view(
    list=extend_schema(
        operation_id="list_chats",
        summary="List my chats",
        description=(
            "Direct and group chats the caller participates in, most recently "
            "updated first, each with its last message and unread count."
        ),
        responses={200: ChatSummarySerializer(many=True)},
        tags=["Chat - Chats"],
    ),
    create=extend_schema(
        operation_id="create_chat",
        summary="Create group chat",
        request=ChatCreateSerializer,
        responses={201: ChatDetailSerializer},
        tags=["Chat - Chats"],
    ),
    retrieve=extend_schema(
        operation_id="get_chat",
        summary="Get chat",
        responses={200: ChatDetailSerializer},
        tags=["Chat - Chats"],
    ),
)
class ChatViewSet(viewsets.GenericViewSet):
    """
    ViewSet for chat operations.

    list:
        The caller's direct and group chats with unread counts.

    create:
        Create a group chat. The caller becomes its first participant.

    retrieve:
        Chat details including participants. Global rooms are visible to
        everyone, other chats only to participants.

    direct:
        Get or create the direct chat with another user.

    global_rooms:
        Browse all global rooms.

    join / leave:
        Join (global rooms or chats you were added to) or leave a chat.

    participants / remove_participant:
        Add a user, or remove one (group creator only, or yourself).

    read / unread:
        Advance the read cursor; get the unread count.

    messages / message_detail:
        History pages and sending; editing and deleting one message.
    """

    permission_classes = [IsAuthenticated, IsNotBanned]
    serializer_class = ChatDetailSerializer
    lookup_value_regex = r"\d+"

    def list(self, request):
        result = ChatService.list_for_user(request.user)
        if not result.success:
            return failure_response(result)
        return Response(
            ChatSummarySerializer(
                result.data, many=True, context={"request": request}
            ).data
        )

    def create(self, request):
        """Create a group chat."""
        serializer = ChatCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        member_ids = data.get("member_ids", [])
        members = list(User.objects.filter(pk__in=member_ids, is_active=True))
        missing = set(member_ids) - {member.pk for member in members}
        if missing:
            return failure_response(
                _user_not_found(", ".join(sorted(str(m) for m in missing)))
            )

        result = ChatService.create_chat(
            creator=request.user,
            kind=data["kind"],
            name=data.get("name"),
            visibility=data.get("visibility"),
            member_cap=data.get("member_cap"),
            description=data.get("description", ""),
            initial_members=members,
        )
        if not result.success:
            return failure_response(result)

        chat = ChatService.get_chat(result.data.pk, request.user).data
        return Response(
            ChatDetailSerializer(chat).data, status=status.HTTP_201_CREATED
        )

    def retrieve(self, request, pk=None):
        result = ChatService.get_chat(int(pk), request.user)
        if not result.success:
            return failure_response(result)
        return Response(ChatDetailSerializer(result.data).data)

    @extend_schema(
        operation_id="get_or_create_direct_chat",
        summary="Start direct chat",
        description=(
            "Return the direct chat with the given user, creating it on first "
            "use. Always returns the same chat for the same pair."
        ),
        request=DirectChatCreateSerializer,
        responses={
            200: ChatDetailSerializer,
            400: OpenApiResponse(description="Same user"),
            404: OpenApiResponse(description="User not found"),
        },
        tags=["Chat - Chats"],
    )
    @action(detail=False, methods=["post"])
    def direct(self, request):
        serializer = DirectChatCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user_id = serializer.validated_data["user_id"]
        other = _active_user(user_id)
        if other is None:
            return failure_response(_user_not_found(user_id))

        result = ChatService.get_or_create_direct_chat(request.user, other)
        if not result.success:
            return failure_response(result)

        chat = ChatService.get_chat(result.data.pk, request.user).data
        return Response(ChatDetailSerializer(chat).data)

    @extend_schema(
        operation_id="list_global_rooms",
        summary="List global rooms",
        responses={200: GlobalRoomSerializer(many=True)},
        tags=["Chat - Chats"],
    )
    @action(detail=False, methods=["get"], url_path="global")
    def global_rooms(self, request):
        result = ChatService.list_global_rooms(request.user)
        if not result.success:
            return failure_response(result)
        return Response(GlobalRoomSerializer(result.data, many=True).data)

    @extend_schema(
        operation_id="join_chat",
        summary="Join chat",
        request=None,
        responses={200: ParticipantSerializer},
        tags=["Chat - Participants"],
    )
    @action(detail=True, methods=["post"])
    def join(self, request, pk=None):
        result = ParticipantService.add_participant(
            int(pk), request.user, added_by=request.user
        )
        if not result.success:
            return failure_response(result)
        return Response(ParticipantSerializer(result.data).data)

    @extend_schema(
        operation_id="leave_chat",
        summary="Leave chat",
        request=None,
        tags=["Chat - Participants"],
    )
    @action(detail=True, methods=["post"])
    def leave(self, request, pk=None):
        result = ParticipantService.remove_participant(
            int(pk), request.user, removed_by=request.user
        )
        if not result.success:
            return failure_response(result)
        return Response({"status": "left" if result.data else "not_a_member"})

    @extend_schema(
        operation_id="add_participant",
        summary="Add participant",
        request=ParticipantCreateSerializer,
        responses={201: ParticipantSerializer},
        tags=["Chat - Participants"],
    )
    @action(detail=True, methods=["post"])
    def participants(self, request, pk=None):
        serializer = ParticipantCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user_id = serializer.validated_data["user_id"]
        user = _active_user(user_id)
        if user is None:
            return failure_response(_user_not_found(user_id))

        result = ParticipantService.add_participant(
            int(pk), user, added_by=request.user
        )
        if not result.success:
            return failure_response(result)
        return Response(
            ParticipantSerializer(result.data).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(
        operation_id="remove_participant",
        summary="Remove participant",
        tags=["Chat - Participants"],
    )
    @action(
        detail=True,
        methods=["delete"],
        url_path=r"participants/(?P<user_id>[0-9a-f-]+)",
    )
    def remove_participant(self, request, pk=None, user_id=None):
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            return failure_response(_user_not_found(user_id))

        result = ParticipantService.remove_participant(
            int(pk), user, removed_by=request.user
        )
        if not result.success:
            return failure_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="mark_chat_read",
        summary="Mark chat as read",
        request=MarkReadSerializer,
        responses={200: ReadCursorSerializer},
        tags=["Chat - Read Tracking"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        serializer = MarkReadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ReadTrackerService.mark_read(
            int(pk),
            request.user,
            upto_message_id=serializer.validated_data.get("message_id"),
        )
        if not result.success:
            return failure_response(result)
        return Response(ReadCursorSerializer(result.data).data)

    @extend_schema(
        operation_id="get_unread_count",
        summary="Get unread count",
        responses={200: UnreadCountSerializer},
        tags=["Chat - Read Tracking"],
    )
    @action(detail=True, methods=["get"])
    def unread(self, request, pk=None):
        result = ReadTrackerService.unread_count(int(pk), request.user)
        if not result.success:
            return failure_response(result)
        return Response({"chat_id": int(pk), "unread_count": result.data})

    @extend_schema(
        methods=["GET"],
        operation_id="list_messages",
        summary="List messages",
        description=(
            "Messages older than `before` (a message id), newest page first, "
            "each page ordered oldest to newest."
        ),
        parameters=[
            OpenApiParameter(
                name="limit",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                description="Page size (1-100, default 50)",
            ),
            OpenApiParameter(
                name="before",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                description="Return messages older than this message id",
            ),
        ],
        responses={200: MessagePageSerializer},
        tags=["Chat - Messages"],
    )
    @extend_schema(
        methods=["POST"],
        operation_id="send_message",
        summary="Send message",
        request=MessageCreateSerializer,
        responses={201: MessageSerializer},
        tags=["Chat - Messages"],
    )
    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):
        if request.method == "POST":
            return self._send_message(request, int(pk))

        query = MessageListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = MessageService.list_for_chat(
            int(pk),
            request.user,
            limit=query.validated_data.get("limit"),
            before=query.validated_data.get("before"),
        )
        if not result.success:
            return failure_response(result)
        return Response(MessagePageSerializer(result.data).data)

    def _send_message(self, request, chat_id: int):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.append(
            chat_id,
            request.user,
            content=serializer.validated_data.get("content"),
            message_type=serializer.validated_data["message_type"],
            media=serializer.media(),
            reply_to_id=serializer.validated_data.get("reply_to_id"),
        )
        if not result.success:
            return failure_response(result)
        return Response(
            MessageSerializer(result.data).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(
        methods=["PATCH"],
        operation_id="edit_message",
        summary="Edit message",
        request=MessageEditSerializer,
        responses={200: MessageSerializer},
        tags=["Chat - Messages"],
    )
    @extend_schema(
        methods=["DELETE"],
        operation_id="delete_message",
        summary="Delete message",
        request=None,
        responses={204: None},
        tags=["Chat - Messages"],
    )
    @action(
        detail=True,
        methods=["patch", "delete"],
        url_path=r"messages/(?P<message_id>\d+)",
    )
    def message_detail(self, request, pk=None, message_id=None):
        if request.method == "DELETE":
            result = MessageService.delete(
                int(message_id), request.user, chat_id=int(pk)
            )
            if not result.success:
                return failure_response(result)
            return Response(status=status.HTTP_204_NO_CONTENT)

        serializer = MessageEditSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.edit(
            int(message_id),
            request.user,
            serializer.validated_data["content"],
            chat_id=int(pk),
        )
        if not result.success:
            return failure_response(result)
        return Response(MessageSerializer(result.data).data)
