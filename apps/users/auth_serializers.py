"""Serializers for authentication flows (register, login, contact verification)."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from apps.listings.models import ServiceOffering

from .models import PHONE_VALIDATOR, Host, PrincipalKind, VerificationCode


class BaseRegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    mobile_number = serializers.CharField(validators=[PHONE_VALIDATOR])
    password = serializers.CharField(min_length=6, write_only=True)
    address = serializers.CharField(required=False, allow_blank=True)


class UserRegisterSerializer(BaseRegisterSerializer):
    full_name = serializers.CharField(max_length=255)


class HostRegisterSerializer(BaseRegisterSerializer):
    business_name = serializers.CharField(max_length=255)
    owner_name = serializers.CharField(max_length=255)
    host_type = serializers.ChoiceField(choices=Host.HostType.choices)
    city = serializers.CharField(max_length=100)
    zip_code = serializers.CharField(max_length=12, required=False, allow_blank=True)
    venue_type = serializers.ChoiceField(choices=Host.VenueType.choices, required=False)
    max_guest_capacity = serializers.IntegerField(min_value=1, required=False)
    services = serializers.ListField(
        child=serializers.ChoiceField(choices=ServiceOffering.Code.choices),
        required=False,
    )

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs.get("host_type") == Host.HostType.VENUE:
            errors = {}
            if not attrs.get("venue_type"):
                errors["venue_type"] = "Venue type is required for venues."
            if not attrs.get("max_guest_capacity"):
                errors["max_guest_capacity"] = "Maximum guest capacity is required for venues."
            if errors:
                raise serializers.ValidationError(errors)
        return attrs


REGISTER_SERIALIZERS = {
    PrincipalKind.USER: UserRegisterSerializer,
    PrincipalKind.HOST: HostRegisterSerializer,
}


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)


class VerifyContactSerializer(serializers.Serializer):
    email = serializers.EmailField()
    otp = serializers.RegexField(r"^\d{6}$", error_messages={"invalid": "Code must be six digits."})
    type = serializers.ChoiceField(choices=VerificationCode.Channel.choices)
    kind = serializers.ChoiceField(choices=PrincipalKind.choices, required=False)
