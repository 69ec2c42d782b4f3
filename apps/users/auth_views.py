"""Views for authentication flows (register, verify contact, login, me, logout)."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from shared.responses import success_response

from .auth_serializers import REGISTER_SERIALIZERS, LoginSerializer, VerifyContactSerializer
from .authentication import token_for_principal
from .serializers import serialize_principal
from .services import authenticate_principal, register_principal, verify_contact

LOGOUT_COOKIE_SECONDS = 10


def _token_response(principal, status_code: int = status.HTTP_200_OK):
    token = token_for_principal(principal)
    response = success_response(
        serialize_principal(principal),
        status=status_code,
        token=token,
        kind=principal.kind,
    )
    response.set_cookie(
        settings.JWT_COOKIE_NAME,
        token,
        max_age=settings.JWT_COOKIE_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=settings.JWT_COOKIE_SECURE,
        samesite="Lax",
    )
    return response


class RegisterView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request, kind: str):  # type: ignore
        serializer = REGISTER_SERIALIZERS[kind](data=request.data)
        serializer.is_valid(raise_exception=True)
        principal = register_principal(kind, **serializer.validated_data)
        return _token_response(principal, status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request, kind: str):  # type: ignore
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        principal = authenticate_principal(kind, **serializer.validated_data)
        return _token_response(principal)


class VerifyContactView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def post(self, request):  # type: ignore
        serializer = VerifyContactSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        principal = verify_contact(data["email"], data["otp"], data["type"], data.get("kind"))
        return success_response(
            {
                "email_verified": principal.email_verified,
                "mobile_verified": principal.mobile_verified,
                "is_verified": principal.is_verified,
            },
            message=f"{data['type'].capitalize()} verified successfully.",
        )


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):  # type: ignore
        principal = request.user
        return success_response(serialize_principal(principal), kind=principal.kind)


class LogoutView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []

    def get(self, request):  # type: ignore
        response = success_response({})
        response.set_cookie(
            settings.JWT_COOKIE_NAME,
            "none",
            max_age=LOGOUT_COOKIE_SECONDS,
            httponly=True,
            secure=settings.JWT_COOKIE_SECURE,
            samesite="Lax",
        )
        return response
