"""
URL configuration for the chat backend.

This is the root URL configuration that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/accounts/              - Account directory
        me/                        - Current user
        status/                    - Presence heartbeat
        search/                    - User search
    /api/v1/chat/                  - Chat endpoints
        chats/                     - My chats (GET) / create group (POST)
        chats/direct/              - Get or create direct chat
        chats/global/              - Browse global rooms
        chats/{id}/                - Chat detail
        chats/{id}/join/           - Join global room
        chats/{id}/leave/          - Leave chat
        chats/{id}/participants/   - Add participant
        chats/{id}/participants/{user_id}/ - Remove participant
        chats/{id}/messages/       - Message history / send
        chats/{id}/messages/{pk}/  - Edit / delete message
        chats/{id}/read/           - Mark as read
        chats/{id}/unread/         - Unread count
    /api/v1/moderation/            - Admin moderation endpoints
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("accounts/", include("authentication.urls")),
    path("chat/", include("chat.urls")),
    path("moderation/", include("moderation.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "Chat Admin"
admin.site.site_title = "Chat Admin Portal"
admin.site.index_title = "Chat store administration"
