"""Booking lifecycle services: creation, visibility and status transitions."""

from __future__ import annotations

import logging
from typing import Any

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import exceptions  # type: ignore

from apps.notifications.models import BookingEvent
from apps.notifications.services import notify_parties
from apps.payments.models import Payment
from apps.users.models import Host
from shared.exceptions import Conflict

from .models import Booking, BookingService, max_advance_start

logger = logging.getLogger(__name__)

# statuses a caller may request; ``pending`` is only ever the initial state
REQUESTABLE_STATUSES = frozenset(
    {Booking.Status.CONFIRMED, Booking.Status.CANCELLED, Booking.Status.COMPLETED}
)


def booking_queryset():
    return Booking.objects.select_related("user", "venue", "payment").prefetch_related(
        "services__service_provider"
    )


def _parse_id(raw: Any, label: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise exceptions.NotFound(f"{label} not found.")


def _resolve_host(raw_id: Any, host_type: str, label: str) -> Host:
    try:
        return Host.objects.get(pk=_parse_id(raw_id, label), host_type=host_type, is_verified=True)
    except Host.DoesNotExist:
        raise exceptions.NotFound(f"{label} not found.")


def get_booking(booking_id: Any) -> Booking:
    try:
        return booking_queryset().get(pk=_parse_id(booking_id, "Booking"))
    except Booking.DoesNotExist:
        raise exceptions.NotFound("Booking not found.")


def is_stakeholder(booking: Booking, principal) -> bool:
    if principal.is_host:
        return booking.is_referenced_by(principal)
    return booking.user_id == principal.pk or principal.is_admin


def bookings_visible_to(principal):
    """Users see their own bookings, hosts the bookings referencing them."""
    queryset = booking_queryset()
    if principal.is_host:
        return queryset.filter(Q(venue=principal) | Q(services__service_provider=principal)).distinct()
    if principal.is_admin:
        return queryset
    return queryset.filter(user=principal)


def get_booking_for(principal, booking_id: Any) -> Booking:
    booking = get_booking(booking_id)
    if not is_stakeholder(booking, principal):
        raise exceptions.PermissionDenied("Not authorized to access this booking.")
    return booking


def create_booking(
    user,
    *,
    event_details: dict,
    customer_details: dict,
    payment: dict,
    venue: Any = None,
    services: list[dict] | None = None,
    amenities: list[dict] | None = None,
) -> Booking:
    """Validate references and persist a pending booking, then notify its parties.

    The venue must be a verified venue host and each service provider a
    verified host of the type matching the requested service. The start
    date may not lie more than ``BOOKING_MAX_ADVANCE_MONTHS`` ahead; the
    model repeats that check when the row is first saved.
    """
    services = services or []
    if not venue and not services:
        raise exceptions.ValidationError({"venue": "A booking needs a venue or at least one service."})

    venue_host = _resolve_host(venue, Host.HostType.VENUE, "Venue") if venue else None
    providers = [
        _resolve_host(
            entry["service_provider"],
            BookingService.PROVIDER_TYPES[entry["service_type"]],
            "Service provider",
        )
        for entry in services
    ]

    if event_details["start_date"] > max_advance_start():
        raise exceptions.ValidationError(
            {
                "start_date": "Bookings can only be made up to "
                f"{settings.BOOKING_MAX_ADVANCE_MONTHS} months in advance."
            }
        )

    with transaction.atomic():
        booking = Booking.objects.create(
            user=user,
            venue=venue_host,
            is_service_only=venue_host is None,
            amenities=amenities or [],
            status=Booking.Status.PENDING,
            **event_details,
            **customer_details,
        )
        BookingService.objects.bulk_create(
            BookingService(
                booking=booking,
                service_provider=provider,
                service_type=entry["service_type"],
                details=entry.get("details", ""),
                price=entry.get("price", 0),
            )
            for entry, provider in zip(services, providers)
        )
        Payment.objects.create(booking=booking, currency=settings.PAYMENT_CURRENCY, **payment)

    logger.info("Booking %s created by user %s", booking.pk, user.pk)
    booking = get_booking(booking.pk)
    notify_parties(booking, BookingEvent.CREATED)
    return booking


def _authorize_transition(booking: Booking, actor, target: str) -> None:
    if actor.is_host:
        if not booking.is_referenced_by(actor):
            raise exceptions.PermissionDenied("Not authorized to update this booking.")
        return
    if booking.user_id != actor.pk:
        raise exceptions.PermissionDenied("Not authorized to update this booking.")
    if target != Booking.Status.CANCELLED:
        raise exceptions.PermissionDenied("Users can only cancel bookings.")


def change_status(booking_id: Any, actor, target: str) -> Booking:
    """Move a booking to ``target`` on behalf of ``actor``.

    Checks run in order: the target must be a requestable status (400), the
    booking must exist (404), the actor must be allowed to request it (403)
    and the transition must be legal from the current status (400). The
    write is conditional on the status read, so a concurrent transition
    makes this one fail with 409 instead of overwriting it.
    """
    if target not in REQUESTABLE_STATUSES:
        raise exceptions.ValidationError({"status": "Invalid status."})

    booking = get_booking(booking_id)
    _authorize_transition(booking, actor, target)

    current = booking.status
    if not booking.can_transition_to(target):
        raise exceptions.ValidationError({"status": f"Cannot change status from {current} to {target}."})

    updated = Booking.objects.filter(pk=booking.pk, status=current).update(
        status=target, updated_at=timezone.now()
    )
    if not updated:
        raise Conflict("Booking status changed concurrently, reload and retry.")

    logger.info("Booking %s moved from %s to %s by %s %s", booking.pk, current, target, actor.kind, actor.pk)
    booking = get_booking(booking.pk)
    notify_parties(booking, BookingEvent.STATUS_CHANGED)
    return booking


def delete_booking(booking_id: Any) -> None:
    booking = get_booking(booking_id)
    booking.delete()
    logger.info("Booking %s deleted", booking_id)
