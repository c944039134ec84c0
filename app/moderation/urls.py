"""
URL configuration for the moderation API.

URL structure:
    /api/v1/moderation/stats/                        - Dashboard counts (GET)
    /api/v1/moderation/users/                        - User listing (GET)
    /api/v1/moderation/users/{id}/                   - Delete user (DELETE)
    /api/v1/moderation/users/{id}/ban/               - Ban (POST)
    /api/v1/moderation/users/{id}/unban/             - Lift ban (POST)
    /api/v1/moderation/users/{id}/restrict/          - Restrict (POST)
    /api/v1/moderation/users/{id}/unrestrict/        - Lift restriction (POST)
    /api/v1/moderation/users/{id}/role/              - Change role (POST)
    /api/v1/moderation/chats/                        - Chat listing (GET)
    /api/v1/moderation/chats/{id}/                   - Delete chat (DELETE)
    /api/v1/moderation/messages/                     - Message listing (GET)
    /api/v1/moderation/messages/{id}/                - Delete message (DELETE)
"""

from django.urls import path

from moderation import views

app_name = "moderation"

urlpatterns = [
    path("stats/", views.StatsView.as_view(), name="stats"),
    path("users/", views.UserListView.as_view(), name="user-list"),
    path("users/<uuid:user_id>/", views.UserDetailView.as_view(), name="user-detail"),
    path(
        "users/<uuid:user_id>/ban/",
        views.UserModerationView.as_view(moderation_action="ban"),
        name="user-ban",
    ),
    path(
        "users/<uuid:user_id>/unban/",
        views.UserModerationView.as_view(moderation_action="unban"),
        name="user-unban",
    ),
    path(
        "users/<uuid:user_id>/restrict/",
        views.UserModerationView.as_view(moderation_action="restrict"),
        name="user-restrict",
    ),
    path(
        "users/<uuid:user_id>/unrestrict/",
        views.UserModerationView.as_view(moderation_action="unrestrict"),
        name="user-unrestrict",
    ),
    path("users/<uuid:user_id>/role/", views.UserRoleView.as_view(), name="user-role"),
    path("chats/", views.ChatListView.as_view(), name="chat-list"),
    path("chats/<int:chat_id>/", views.ChatDetailView.as_view(), name="chat-detail"),
    path("messages/", views.MessageListView.as_view(), name="message-list"),
    path(
        "messages/<int:message_id>/",
        views.MessageDetailView.as_view(),
        name="message-detail",
    ),
]
