"""Payment terms and settlement state of a booking."""

from __future__ import annotations

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Payment(models.Model):
    """Amounts agreed for a booking and whether the advance was paid.

    ``is_paid`` flips from False to True exactly once, through a conditional
    update, whichever confirmation path gets there first.
    """

    class Method(models.TextChoices):
        BANK_TRANSFER = "bank_transfer", _("Bank transfer")
        UPI = "upi", _("UPI")
        ONLINE_PAYMENT = "online_payment", _("Online payment")

    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.CASCADE,
        related_name="payment",
    )
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    advance_amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    remaining_amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    method = models.CharField(max_length=20, choices=Method.choices)
    currency = models.CharField(max_length=3, default="inr")
    is_paid = models.BooleanField(default=False)
    transaction_id = models.CharField(max_length=255, blank=True)
    payment_date = models.DateTimeField(null=True, blank=True)
    provider_intent_id = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        state = "paid" if self.is_paid else "unpaid"
        return f"Payment for booking #{self.booking_id} ({state})"
