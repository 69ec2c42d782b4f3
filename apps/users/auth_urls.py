"""URL routing for authentication endpoints (namespace: auth)."""

from __future__ import annotations

from django.urls import path, re_path  # type: ignore

from .auth_views import LoginView, LogoutView, MeView, RegisterView, VerifyContactView

app_name = "auth"

urlpatterns = [
    re_path(r"^register/(?P<kind>user|host)/$", RegisterView.as_view(), name="register"),
    re_path(r"^login/(?P<kind>user|host)/$", LoginView.as_view(), name="login"),
    path("verify-otp/", VerifyContactView.as_view(), name="verify-otp"),
    path("me/", MeView.as_view(), name="me"),
    path("logout/", LogoutView.as_view(), name="logout"),
]
