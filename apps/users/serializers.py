"""Serializers for principal representations and profile updates."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from apps.listings.models import ServiceOffering
from shared.exceptions import Conflict

from .models import PHONE_VALIDATOR, Host, PrincipalManager, User


class ServiceCodesField(serializers.ListField):
    """Services offered by a host, exchanged as a list of service codes."""

    child = serializers.ChoiceField(choices=ServiceOffering.Code.choices)

    def to_representation(self, data):  # type: ignore
        return [offering.code for offering in data.all()]


class UserSerializer(serializers.ModelSerializer):
    """Public representation of a user account."""

    class Meta:
        model = User
        fields = [
            "id",
            "full_name",
            "email",
            "mobile_number",
            "address",
            "role",
            "email_verified",
            "mobile_verified",
            "is_verified",
            "created_at",
        ]
        read_only_fields = fields


class UserProfileUpdateSerializer(serializers.ModelSerializer):
    mobile_number = serializers.CharField(validators=[PHONE_VALIDATOR], required=False)

    class Meta:
        model = User
        fields = ["full_name", "mobile_number", "address"]

    def validate_mobile_number(self, value: str) -> str:
        value = PrincipalManager.normalize_phone(value)
        taken = User.objects.filter(mobile_number=value).exclude(pk=self.instance.pk).exists()
        if taken:
            raise Conflict("This mobile number is already registered.")
        return value


class HostSerializer(serializers.ModelSerializer):
    """Host profile without credentials or verification documents."""

    services = ServiceCodesField(required=False)

    class Meta:
        model = Host
        fields = [
            "id",
            "business_name",
            "owner_name",
            "email",
            "mobile_number",
            "host_type",
            "address",
            "city",
            "zip_code",
            "venue_type",
            "max_guest_capacity",
            "vegetarian_menu",
            "non_vegetarian_menu",
            "event_types",
            "services",
            "base_price",
            "price_per_hour",
            "price_per_day",
            "cleaning_fee",
            "security_deposit",
            "accepts_bank_transfer",
            "accepts_upi",
            "accepts_online_payment",
            "upi_id",
            "advance_percentage",
            "rating",
            "email_verified",
            "mobile_verified",
            "is_verified",
            "created_at",
        ]
        read_only_fields = [
            "id",
            "email",
            "mobile_number",
            "host_type",
            "rating",
            "email_verified",
            "mobile_verified",
            "is_verified",
            "created_at",
        ]

    def create(self, validated_data: dict[str, Any]):  # type: ignore
        codes = validated_data.pop("services", None)
        host = super().create(validated_data)
        if codes is not None:
            host.services.set(ServiceOffering.objects.for_codes(codes))
        return host

    def update(self, instance, validated_data: dict[str, Any]):  # type: ignore
        codes = validated_data.pop("services", None)
        host = super().update(instance, validated_data)
        if codes is not None:
            host.services.set(ServiceOffering.objects.for_codes(codes))
        return host


PRINCIPAL_SERIALIZERS = {
    "user": UserSerializer,
    "host": HostSerializer,
}


def serialize_principal(principal) -> dict:
    return PRINCIPAL_SERIALIZERS[principal.kind](principal).data
