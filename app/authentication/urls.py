"""
URL configuration for the account directory.

URL structure:
    /api/v1/accounts/me/        - Current user (GET)
    /api/v1/accounts/status/    - Presence update (POST)
    /api/v1/accounts/search/    - User search (GET ?q=)
"""

from django.urls import path

from authentication.views import CurrentUserView, OnlineStatusView, UserSearchView

app_name = "authentication"

urlpatterns = [
    path("me/", CurrentUserView.as_view(), name="me"),
    path("status/", OnlineStatusView.as_view(), name="status"),
    path("search/", UserSearchView.as_view(), name="search"),
]
