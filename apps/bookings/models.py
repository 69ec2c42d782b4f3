"""Booking domain models for EventO."""

from __future__ import annotations

from datetime import datetime

from dateutil.relativedelta import relativedelta
from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models, transaction  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


def max_advance_start(now: datetime | None = None) -> datetime:
    """Latest start date a booking created at ``now`` may request."""
    now = now or timezone.now()
    return now + relativedelta(months=settings.BOOKING_MAX_ADVANCE_MONTHS)


class Booking(models.Model):
    """Reservation of a venue and/or services for an event.

    Lifecycle::

        pending -> confirmed | cancelled
        confirmed -> completed | cancelled

    ``cancelled`` and ``completed`` are terminal.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        COMPLETED = "completed", _("Completed")

    class EventType(models.TextChoices):
        WEDDING = "wedding", _("Wedding")
        BIRTHDAY = "birthday", _("Birthday")
        CORPORATE = "corporate", _("Corporate")
        CULTURAL = "cultural", _("Cultural")
        ENGAGEMENT = "engagement", _("Engagement")
        OTHER = "other", _("Other")

    TRANSITIONS: dict[str, frozenset[str]] = {
        Status.PENDING: frozenset({Status.CONFIRMED, Status.CANCELLED}),
        Status.CONFIRMED: frozenset({Status.COMPLETED, Status.CANCELLED}),
        Status.CANCELLED: frozenset(),
        Status.COMPLETED: frozenset(),
    }

    user = models.ForeignKey(
        "users.User",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    venue = models.ForeignKey(
        "users.Host",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="venue_bookings",
    )
    is_service_only = models.BooleanField(default=False)

    # Event details
    event_type = models.CharField(max_length=20, choices=EventType.choices)
    guest_count = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    special_requests = models.TextField(blank=True)

    # Snapshot of the customer's contact identity at booking time
    customer_name = models.CharField(max_length=255)
    customer_contact_number = models.CharField(max_length=20)
    customer_aadhaar_number = models.CharField(max_length=12, blank=True)

    amenities = models.JSONField(default=list, blank=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    # Best-effort delivery bookkeeping
    email_sent = models.BooleanField(default=False)
    sms_sent = models.BooleanField(default=False)
    call_made = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status", "start_date"]),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} ({self.event_type}, {self.status})"

    def clean(self) -> None:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({"end_date": _("End date cannot be before start date.")})
        if self._state.adding and self.start_date and self.start_date > max_advance_start():
            raise ValidationError(
                {
                    "start_date": _("Bookings can only be made up to %(months)s months in advance.")
                    % {"months": settings.BOOKING_MAX_ADVANCE_MONTHS}
                }
            )

    def save(self, *args, **kwargs):  # type: ignore
        with transaction.atomic():
            if self._state.adding:
                self.clean()
            super().save(*args, **kwargs)

    # --- Lifecycle helpers ---------------------------------------------------
    def can_transition_to(self, target: str) -> bool:
        return target in self.TRANSITIONS.get(self.status, frozenset())

    def referenced_host_ids(self) -> set[int]:
        ids = set(self.services.values_list("service_provider_id", flat=True))
        if self.venue_id:
            ids.add(self.venue_id)
        return ids

    def is_referenced_by(self, host) -> bool:
        return host.pk in self.referenced_host_ids()

    def record_delivery(self, *, email_sent: bool, sms_sent: bool) -> None:
        flags = {}
        if email_sent:
            flags["email_sent"] = True
        if sms_sent:
            flags["sms_sent"] = True
        if not flags:
            return
        Booking.objects.filter(pk=self.pk).update(**flags)
        for name, value in flags.items():
            setattr(self, name, value)


class BookingService(models.Model):
    """A service requested from a provider as part of a booking."""

    class ServiceType(models.TextChoices):
        CATERING = "catering", _("Catering")
        DECORATION = "decoration", _("Decoration")
        ORGANIZATION = "organization", _("Organization")

    # provider host type required for each service type
    PROVIDER_TYPES = {
        ServiceType.CATERING: "caterer",
        ServiceType.DECORATION: "decorator",
        ServiceType.ORGANIZATION: "organizer",
    }

    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="services")
    service_provider = models.ForeignKey(
        "users.Host",
        on_delete=models.PROTECT,
        related_name="service_requests",
    )
    service_type = models.CharField(max_length=20, choices=ServiceType.choices)
    details = models.TextField(blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])

    class Meta:
        verbose_name = _("Booked service")
        verbose_name_plural = _("Booked services")
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.get_service_type_display()} for booking #{self.booking_id}"
