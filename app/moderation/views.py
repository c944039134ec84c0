"""
Moderation API views.

All endpoints require the admin role (IsAdminRole); the services repeat
the check so they stay safe when called outside HTTP.

Related files:
    - services.py: ModerationService
    - serializers.py: Request/response serialization
    - urls.py: URL routing
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.views import failure_response
from moderation.pagination import AdminPagination
from moderation.permissions import IsAdminRole
from moderation.serializers import (
    AdminChatSerializer,
    AdminMessageSerializer,
    AdminUserSerializer,
    ModerationActionSerializer,
    RoleSerializer,
    StatsSerializer,
)
from moderation.services import ModerationService


class AdminAPIView(APIView):
    """Base view for admin endpoints."""

    permission_classes = [IsAuthenticated, IsAdminRole]

    def paginated(self, request, queryset, serializer_class):
        paginator = AdminPagination()
        page = paginator.paginate_queryset(queryset, request, view=self)
        return paginator.get_paginated_response(serializer_class(page, many=True).data)


# =============================================================================
# Dashboard
# =============================================================================


class StatsView(AdminAPIView):
    """
    GET: Headline counts.

    URL: /api/v1/moderation/stats/
    """

    @extend_schema(summary="Moderation stats", tags=["Moderation"], responses={200: StatsSerializer})
    def get(self, request):
        result = ModerationService.get_stats(request.user)
        if not result.success:
            return failure_response(result)
        return Response(StatsSerializer(result.data).data)


# =============================================================================
# Users
# =============================================================================


class UserListView(AdminAPIView):
    """
    GET: All users, newest first.

    URL: /api/v1/moderation/users/?search=<text>
    """

    @extend_schema(
        summary="List users",
        tags=["Moderation"],
        parameters=[
            OpenApiParameter(
                name="search",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                description="Filter by email or display name",
            ),
        ],
        responses={200: AdminUserSerializer(many=True)},
    )
    def get(self, request):
        result = ModerationService.list_users(
            request.user, request.query_params.get("search", "")
        )
        if not result.success:
            return failure_response(result)
        return self.paginated(request, result.data, AdminUserSerializer)


class UserDetailView(AdminAPIView):
    """
    DELETE: Delete a user account. Their messages remain as "Deleted user".

    URL: /api/v1/moderation/users/{user_id}/
    """

    @extend_schema(
        summary="Delete user",
        tags=["Moderation"],
        responses={204: OpenApiResponse(description="User deleted")},
    )
    def delete(self, request, user_id):
        result = ModerationService.delete_user(request.user, user_id)
        if not result.success:
            return failure_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)


class UserModerationView(AdminAPIView):
    """
    POST: Apply or lift a moderation status.

    URLs:
        /api/v1/moderation/users/{user_id}/ban/
        /api/v1/moderation/users/{user_id}/unban/
        /api/v1/moderation/users/{user_id}/restrict/
        /api/v1/moderation/users/{user_id}/unrestrict/

    Request body (ban/restrict):
        {"reason": "Spam"}
    """

    moderation_action = None

    @extend_schema(
        summary="Moderate user",
        tags=["Moderation"],
        request=ModerationActionSerializer,
        responses={200: AdminUserSerializer},
    )
    def post(self, request, user_id):
        if self.moderation_action in ("ban", "restrict"):
            serializer = ModerationActionSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            reason = serializer.validated_data.get("reason")
            apply = (
                ModerationService.ban_user
                if self.moderation_action == "ban"
                else ModerationService.restrict_user
            )
            result = apply(request.user, user_id, reason=reason)
        elif self.moderation_action == "unban":
            result = ModerationService.lift_ban(request.user, user_id)
        else:
            result = ModerationService.lift_restriction(request.user, user_id)

        if not result.success:
            return failure_response(result)
        return Response(AdminUserSerializer(result.data).data)


class UserRoleView(AdminAPIView):
    """
    POST: Change a user's role.

    URL: /api/v1/moderation/users/{user_id}/role/

    Request body:
        {"role": "moderator"}
    """

    @extend_schema(
        summary="Set user role",
        tags=["Moderation"],
        request=RoleSerializer,
        responses={200: AdminUserSerializer},
    )
    def post(self, request, user_id):
        serializer = RoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ModerationService.set_role(
            request.user, user_id, serializer.validated_data["role"]
        )
        if not result.success:
            return failure_response(result)
        return Response(AdminUserSerializer(result.data).data)


# =============================================================================
# Chats and messages
# =============================================================================


class ChatListView(AdminAPIView):
    """
    GET: All chats, newest first.

    URL: /api/v1/moderation/chats/?kind=<direct|group|global>
    """

    @extend_schema(
        summary="List chats",
        tags=["Moderation"],
        parameters=[
            OpenApiParameter(
                name="kind",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                description="Only chats of this kind",
            ),
        ],
        responses={200: AdminChatSerializer(many=True)},
    )
    def get(self, request):
        result = ModerationService.list_chats(request.user, request.query_params.get("kind"))
        if not result.success:
            return failure_response(result)
        return self.paginated(request, result.data, AdminChatSerializer)


class ChatDetailView(AdminAPIView):
    """
    DELETE: Delete a chat with all its messages.

    URL: /api/v1/moderation/chats/{chat_id}/
    """

    @extend_schema(
        summary="Delete chat",
        tags=["Moderation"],
        responses={204: OpenApiResponse(description="Chat deleted")},
    )
    def delete(self, request, chat_id):
        result = ModerationService.delete_chat(request.user, chat_id)
        if not result.success:
            return failure_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MessageListView(AdminAPIView):
    """
    GET: All messages, newest first.

    URL: /api/v1/moderation/messages/?chat_id=<id>
    """

    @extend_schema(
        summary="List messages",
        tags=["Moderation"],
        parameters=[
            OpenApiParameter(
                name="chat_id",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                description="Only messages in this chat",
            ),
        ],
        responses={200: AdminMessageSerializer(many=True)},
    )
    def get(self, request):
        chat_id = request.query_params.get("chat_id")
        if chat_id is not None and not chat_id.isdigit():
            return Response(
                {"error": "chat_id must be an integer", "error_code": "VALIDATION_ERROR"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        result = ModerationService.list_messages(
            request.user, int(chat_id) if chat_id is not None else None
        )
        if not result.success:
            return failure_response(result)
        return self.paginated(request, result.data, AdminMessageSerializer)


class MessageDetailView(AdminAPIView):
    """
    DELETE: Delete a single message.

    URL: /api/v1/moderation/messages/{message_id}/
    """

    @extend_schema(
        summary="Delete message",
        tags=["Moderation"],
        responses={204: OpenApiResponse(description="Message deleted")},
    )
    def delete(self, request, message_id):
        result = ModerationService.delete_message(request.user, message_id)
        if not result.success:
            return failure_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)
