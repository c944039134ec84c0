"""
Account directory views.

This module provides API views for:
- The caller's own account record
- Presence updates (client heartbeat)
- User search for starting chats

Related files:
    - serializers.py: Request/response serialization
    - services.py: AccountService
    - urls.py: URL routing

Note:
    Tokens are issued by the external identity provider. These views only
    verify them (JWTAuthentication) and never log users in or out.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.serializers import (
    CurrentUserSerializer,
    OnlineStatusSerializer,
    UserSerializer,
)
from authentication.services import AccountService
from core.views import failure_response


class CurrentUserView(APIView):
    """
    GET: Retrieve the caller's account, including moderation state.

    URL: /api/v1/accounts/me/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Get current user",
        tags=["Accounts"],
        responses={200: CurrentUserSerializer},
    )
    def get(self, request):
        return Response(CurrentUserSerializer(request.user).data)


class OnlineStatusView(APIView):
    """
    POST: Update the caller's presence flag.

    URL: /api/v1/accounts/status/

    Request body:
        {"is_online": true}
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Update online status",
        tags=["Accounts"],
        request=OnlineStatusSerializer,
        responses={200: CurrentUserSerializer},
    )
    def post(self, request):
        serializer = OnlineStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AccountService.set_online_status(
            request.user, serializer.validated_data["is_online"]
        )
        if not result.success:
            return failure_response(result)
        return Response(CurrentUserSerializer(result.data).data)


class UserSearchView(APIView):
    """
    GET: Search users by email or display name.

    URL: /api/v1/accounts/search/?q=<query>

    The caller and banned users are never returned.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        summary="Search users",
        tags=["Accounts"],
        parameters=[
            OpenApiParameter(
                name="q",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                description="Search text (minimum 2 characters)",
            ),
        ],
        responses={200: UserSerializer(many=True)},
    )
    def get(self, request):
        result = AccountService.search_users(
            request.query_params.get("q", ""), exclude=request.user
        )
        if not result.success:
            return failure_response(result)
        return Response(UserSerializer(result.data, many=True).data)
