"""Notification dispatch ledger.

A booking event (creation, a status change, a payment) fans out email and SMS
messages to every party of the booking. Each fan-out is recorded here under
a unique ``(booking, event_key)`` pair before any message is sent, so the
same event is never broadcast twice even when two code paths report it
concurrently.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class BookingEvent(models.TextChoices):
    CREATED = "created", _("Booking created")
    STATUS_CHANGED = "status_changed", _("Booking status changed")
    PAID = "paid", _("Booking paid")
    PAYMENT_RECORDED = "payment_recorded", _("Payment recorded without confirmation")


class NotificationDispatch(models.Model):
    booking = models.ForeignKey(
        'bookings.Booking', on_delete=models.CASCADE, related_name='notification_dispatches'
    )
    event = models.CharField(max_length=20, choices=BookingEvent.choices)
    event_key = models.CharField(max_length=64)
    recipients = models.PositiveSmallIntegerField(default=0)
    emails_delivered = models.PositiveSmallIntegerField(default=0)
    sms_delivered = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['booking', 'event_key'], name='unique_booking_event_dispatch'),
        ]

    def __str__(self) -> str:
        return f"{self.event_key} for booking {self.booking_id}"
