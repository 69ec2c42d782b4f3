"""Payment reconciliation.

A booking's advance can be settled from two directions: the client reports
a transaction id after paying (``confirm_payment``) or Stripe calls the
webhook once a PaymentIntent succeeds (``handle_webhook_event``). Both end
in ``mark_booking_paid``, whose conditional update on ``is_paid`` lets
exactly one of them win; only the winner advances the booking and sends
the payment notifications.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import structlog
from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import exceptions  # type: ignore

from apps.bookings.models import Booking
from apps.bookings.services import get_booking, get_booking_for
from apps.notifications.models import BookingEvent
from apps.notifications.services import notify_parties

from . import gateway
from .models import Payment

logger = structlog.get_logger(__name__)

PAYABLE_STATUSES = frozenset({Booking.Status.PENDING, Booking.Status.CONFIRMED})
SUCCEEDED_EVENT = "payment_intent.succeeded"


def intent_amount(advance: Decimal) -> int:
    """Advance amount in minor currency units (paise, cents)."""
    return int((Decimal(advance) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _payment_of(booking: Booking) -> Payment:
    try:
        return booking.payment
    except Payment.DoesNotExist:
        raise exceptions.NotFound("Payment not found for this booking.")


def _owned_booking(user, booking_id: Any) -> Booking:
    booking = get_booking(booking_id)
    if booking.user_id != user.pk:
        raise exceptions.PermissionDenied("Not authorized to pay for this booking.")
    return booking


def create_intent(user, booking_id: Any, payment_method: str) -> dict[str, Any]:
    booking = _owned_booking(user, booking_id)
    payment = _payment_of(booking)
    if payment.is_paid:
        raise exceptions.ValidationError({"booking_id": "Booking is already paid."})
    if payment_method != Payment.Method.ONLINE_PAYMENT:
        raise exceptions.ValidationError({"payment_method": "This endpoint is only for online payments."})

    amount = intent_amount(payment.advance_amount)
    intent = gateway.create_payment_intent(
        amount,
        payment.currency,
        {"booking_id": str(booking.pk), "user_id": str(user.pk)},
    )
    Payment.objects.filter(pk=payment.pk).update(provider_intent_id=intent.id, updated_at=timezone.now())
    return {
        "client_secret": intent.client_secret,
        "payment_intent_id": intent.id,
        "amount": amount,
        "currency": payment.currency,
    }


def mark_booking_paid(booking: Booking, transaction_id: str, method: str | None = None) -> bool:
    """Record the payment of ``booking`` unless it was already recorded.

    Returns True when this call flipped ``is_paid``. A pending booking is
    confirmed at the same time; other statuses are left alone. Parties of a
    booking that did not end up confirmed (cancelled or completed) hear that
    the payment was recorded rather than that the booking is confirmed.
    """
    now = timezone.now()
    changes: dict[str, Any] = {
        "is_paid": True,
        "transaction_id": transaction_id,
        "payment_date": now,
        "updated_at": now,
    }
    if method:
        changes["method"] = method

    with transaction.atomic():
        marked = Payment.objects.filter(booking_id=booking.pk, is_paid=False).update(**changes)
        if not marked:
            return False
        Booking.objects.filter(pk=booking.pk, status=Booking.Status.PENDING).update(
            status=Booking.Status.CONFIRMED, updated_at=now
        )

    logger.info("booking_paid", booking_id=booking.pk, transaction_id=transaction_id)
    booking = get_booking(booking.pk)
    event = BookingEvent.PAID if booking.status == Booking.Status.CONFIRMED else BookingEvent.PAYMENT_RECORDED
    notify_parties(booking, event, transaction_id=transaction_id)
    return True


def confirm_payment(user, booking_id: Any, transaction_id: str, payment_method: str | None = None) -> Booking:
    booking = _owned_booking(user, booking_id)
    if _payment_of(booking).is_paid:
        raise exceptions.ValidationError({"booking_id": "Booking is already paid."})
    if booking.status not in PAYABLE_STATUSES:
        raise exceptions.ValidationError({"status": f"Cannot pay for a {booking.status} booking."})
    if not mark_booking_paid(booking, transaction_id, payment_method):
        raise exceptions.ValidationError({"booking_id": "Booking is already paid."})
    return get_booking(booking.pk)


def handle_webhook_event(event) -> bool:
    """Apply a verified Stripe event, returning True if it marked a booking paid.

    Redelivered events and events for unknown or already paid bookings are
    acknowledged without side effects.
    """
    if event["type"] != SUCCEEDED_EVENT:
        logger.info("webhook_ignored", event_type=event["type"])
        return False

    intent = event["data"]["object"]
    try:
        booking_id = intent["metadata"]["booking_id"]
    except KeyError:
        logger.warning("webhook_without_booking", intent_id=intent["id"])
        return False

    try:
        booking = get_booking(booking_id)
    except exceptions.NotFound:
        logger.warning("webhook_unknown_booking", intent_id=intent["id"], booking_id=booking_id)
        return False

    return mark_booking_paid(booking, intent["id"], Payment.Method.ONLINE_PAYMENT)


def payment_details_for(principal, booking_id: Any) -> Payment:
    return _payment_of(get_booking_for(principal, booking_id))
