"""Serializers for the booking API.

Booking payloads are grouped into ``event_details``, ``customer_details``
and ``payment`` blocks. The same block serializers are used for input and,
with ``source="*"``, for output.
"""

from __future__ import annotations

from datetime import datetime, time
from decimal import Decimal
from typing import Any

from django.utils.dateparse import parse_date  # type: ignore
from rest_framework import serializers  # type: ignore

from apps.payments.serializers import PaymentSerializer, PaymentTermsSerializer
from apps.users.models import PHONE_VALIDATOR, Host

from .models import Booking, BookingService
from .services import create_booking


class EventDateTimeField(serializers.DateTimeField):
    """Accepts full timestamps or plain ``YYYY-MM-DD`` dates (midnight)."""

    def to_internal_value(self, value):  # type: ignore
        if isinstance(value, str) and len(value) == 10:
            parsed = parse_date(value)
            if parsed is not None:
                value = datetime.combine(parsed, time.min)
        return super().to_internal_value(value)


class EventDetailsSerializer(serializers.Serializer):
    event_type = serializers.ChoiceField(choices=Booking.EventType.choices)
    guest_count = serializers.IntegerField(min_value=1)
    start_date = EventDateTimeField()
    end_date = EventDateTimeField()
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs["end_date"] < attrs["start_date"]:
            raise serializers.ValidationError({"end_date": "End date cannot be before start date."})
        return attrs


class CustomerDetailsSerializer(serializers.Serializer):
    name = serializers.CharField(source="customer_name", max_length=255)
    contact_number = serializers.CharField(source="customer_contact_number", validators=[PHONE_VALIDATOR])
    aadhaar_number = serializers.RegexField(
        r"^\d{12}$",
        source="customer_aadhaar_number",
        required=False,
        allow_blank=True,
        default="",
        error_messages={"invalid": "Aadhaar number must be 12 digits."},
    )


class AmenitySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"), coerce_to_string=False)


class ServiceRequestSerializer(serializers.Serializer):
    # kept as a string so malformed ids surface as "not found"
    service_provider = serializers.CharField()
    service_type = serializers.ChoiceField(choices=BookingService.ServiceType.choices)
    details = serializers.CharField(required=False, allow_blank=True, default="")
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"), default=Decimal("0"))


class BookingCreateSerializer(serializers.Serializer):
    venue = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    services = ServiceRequestSerializer(many=True, required=False)
    event_details = EventDetailsSerializer()
    customer_details = CustomerDetailsSerializer()
    amenities = AmenitySerializer(many=True, required=False)
    payment = PaymentTermsSerializer()

    def validate_amenities(self, value: list[dict]) -> list[dict]:
        # stored in a JSON column
        return [{"name": item["name"], "price": str(item["price"])} for item in value]

    def create(self, validated_data: dict[str, Any]) -> Booking:  # type: ignore
        return create_booking(self.context["request"].user, **validated_data)


class BookingHostSerializer(serializers.ModelSerializer):
    class Meta:
        model = Host
        fields = ["id", "business_name", "host_type", "city", "email", "mobile_number"]


class BookingServiceSerializer(serializers.ModelSerializer):
    service_provider = BookingHostSerializer(read_only=True)

    class Meta:
        model = BookingService
        fields = ["id", "service_provider", "service_type", "details", "price"]


class NotificationFlagsSerializer(serializers.Serializer):
    email_sent = serializers.BooleanField(read_only=True)
    sms_sent = serializers.BooleanField(read_only=True)
    call_made = serializers.BooleanField(read_only=True)


class BookingSerializer(serializers.ModelSerializer):
    venue = BookingHostSerializer(read_only=True)
    services = BookingServiceSerializer(many=True, read_only=True)
    event_details = EventDetailsSerializer(source="*", read_only=True)
    customer_details = CustomerDetailsSerializer(source="*", read_only=True)
    payment = PaymentSerializer(read_only=True)
    notifications = NotificationFlagsSerializer(source="*", read_only=True)

    class Meta:
        model = Booking
        fields = [
            "id",
            "user",
            "venue",
            "services",
            "is_service_only",
            "event_details",
            "customer_details",
            "amenities",
            "payment",
            "status",
            "notifications",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.CharField()
