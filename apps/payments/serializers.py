"""Serializers for payment terms and payment endpoints."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from rest_framework import serializers  # type: ignore

from .models import Payment


class PaymentTermsSerializer(serializers.Serializer):
    """Amounts and method submitted when a booking is created."""

    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))
    advance_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))
    remaining_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0"), required=False
    )
    payment_method = serializers.ChoiceField(choices=Payment.Method.choices, source="method")

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs["advance_amount"] > attrs["total_amount"]:
            raise serializers.ValidationError({"advance_amount": "Advance cannot exceed the total amount."})
        attrs.setdefault("remaining_amount", attrs["total_amount"] - attrs["advance_amount"])
        return attrs


class PaymentSerializer(serializers.ModelSerializer):
    payment_method = serializers.CharField(source="method", read_only=True)
    booking = serializers.IntegerField(source="booking_id", read_only=True)

    class Meta:
        model = Payment
        fields = [
            "booking",
            "total_amount",
            "advance_amount",
            "remaining_amount",
            "payment_method",
            "currency",
            "is_paid",
            "transaction_id",
            "payment_date",
        ]
        read_only_fields = fields


class PaymentIntentRequestSerializer(serializers.Serializer):
    booking_id = serializers.CharField()
    payment_method = serializers.ChoiceField(choices=Payment.Method.choices)


class PaymentConfirmSerializer(serializers.Serializer):
    booking_id = serializers.CharField()
    transaction_id = serializers.CharField(max_length=255)
    payment_method = serializers.ChoiceField(choices=Payment.Method.choices, required=False)
