"""
URL configuration for chat API.

URL Structure:
    Chats:
        /chats/                                  GET, POST
        /chats/direct/                           POST
        /chats/global/                           GET
        /chats/{id}/                             GET
        /chats/{id}/join/                        POST
        /chats/{id}/leave/                       POST

    Participants:
        /chats/{id}/participants/                POST
        /chats/{id}/participants/{user_id}/      DELETE

    Read tracking:
        /chats/{id}/read/                        POST
        /chats/{id}/unread/                      GET

    Messages:
        /chats/{id}/messages/                    GET, POST
        /chats/{id}/messages/{message_id}/       PATCH, DELETE

All URLs are prefixed with /api/v1/chat/ in the main URL configuration.
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from chat.views import ChatViewSet

router = DefaultRouter()
router.register(r"chats", ChatViewSet, basename="chat")

app_name = "chat"

urlpatterns = [
    path("", include(router.urls)),
]
