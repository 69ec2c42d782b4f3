"""JWT authentication for both principal kinds.

The credential is read from the ``Authorization: Bearer`` header first and
from the ``token`` cookie otherwise. The ``kind`` claim selects the table the
principal is loaded from.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore
from rest_framework_simplejwt.authentication import JWTAuthentication  # type: ignore
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken  # type: ignore
from rest_framework_simplejwt.settings import api_settings  # type: ignore
from rest_framework_simplejwt.tokens import AccessToken  # type: ignore

from .models import PRINCIPAL_MODELS, PrincipalBase

KIND_CLAIM = "kind"


def token_for_principal(principal: PrincipalBase) -> str:
    token = AccessToken.for_user(principal)
    token[KIND_CLAIM] = principal.kind
    return str(token)


class PrincipalJWTAuthentication(JWTAuthentication):
    def authenticate(self, request):  # type: ignore
        header = self.get_header(request)
        if header is not None:
            raw_token = self.get_raw_token(header)
        else:
            raw_token = request.COOKIES.get(settings.JWT_COOKIE_NAME)
            # logout overwrites the cookie with a placeholder
            if raw_token in (None, "", "none"):
                raw_token = None
        if raw_token is None:
            return None

        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token

    def get_user(self, validated_token):  # type: ignore
        try:
            principal_id = validated_token[api_settings.USER_ID_CLAIM]
            kind = validated_token[KIND_CLAIM]
        except KeyError:
            raise InvalidToken(_("Token contained no recognizable principal identification"))

        model = PRINCIPAL_MODELS.get(kind)
        if model is None:
            raise InvalidToken(_("Token contained an unknown principal kind"))

        try:
            principal = model.objects.get(pk=principal_id)
        except (model.DoesNotExist, ValueError, TypeError):
            raise AuthenticationFailed(_("Principal not found"), code="user_not_found")

        if not principal.is_active:
            raise AuthenticationFailed(_("Principal is inactive"), code="user_inactive")
        return principal
