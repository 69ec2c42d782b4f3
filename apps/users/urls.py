from django.urls import path  # type: ignore

from .views import UserListView, UserProfileView

urlpatterns = [
    path("", UserListView.as_view(), name="user-list"),
    path("profile/", UserProfileView.as_view(), name="user-profile"),
]
