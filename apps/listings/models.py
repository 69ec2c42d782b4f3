"""Catalogue data attached to host accounts.

Each host subtype has its own structured payload: caterers list menu items,
decorators list decoration categories and organizers list the services they
run. Every host may also publish an availability calendar, media files and
receive reviews.
"""

from __future__ import annotations

import uuid
from pathlib import PurePosixPath

from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class ServiceOfferingManager(models.Manager):
    def for_codes(self, codes):
        return [self.get_or_create(code=code)[0] for code in dict.fromkeys(codes)]


class ServiceOffering(models.Model):
    """A kind of service a host advertises, used for directory filtering."""

    class Code(models.TextChoices):
        CATERING = "catering", _("Catering")
        DECORATION = "decoration", _("Decoration")
        ORGANIZATION = "organization", _("Organization")
        PARKING = "parking", _("Parking")
        MUSIC = "music", _("Music")
        PHOTOGRAPHY = "photography", _("Photography")
        VIDEOGRAPHY = "videography", _("Videography")
        OTHER = "other", _("Other")

    code = models.CharField(max_length=20, unique=True, choices=Code.choices)

    objects = ServiceOfferingManager()

    class Meta:
        verbose_name = _("Service offering")
        verbose_name_plural = _("Service offerings")
        ordering = ["code"]

    def __str__(self) -> str:
        return self.get_code_display()


class MenuItem(models.Model):
    host = models.ForeignKey("users.Host", on_delete=models.CASCADE, related_name="menu_items")
    category = models.CharField(max_length=100)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    is_vegetarian = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Menu item")
        verbose_name_plural = _("Menu items")
        ordering = ["category", "name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.category})"


class DecorationCategory(models.Model):
    host = models.ForeignKey("users.Host", on_delete=models.CASCADE, related_name="decoration_categories")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price_per_sq_ft = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    package_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    class Meta:
        verbose_name = _("Decoration category")
        verbose_name_plural = _("Decoration categories")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    def clean(self) -> None:
        if self.price_per_sq_ft is None and self.package_price is None:
            raise ValidationError(_("Either price per sq ft or package price is required."))


class OrganizerService(models.Model):
    host = models.ForeignKey("users.Host", on_delete=models.CASCADE, related_name="organizer_services")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price_per_guest = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])

    class Meta:
        verbose_name = _("Organizer service")
        verbose_name_plural = _("Organizer services")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class AvailabilityDay(models.Model):
    """One calendar day of a host, with optional bookable time slots.

    ``time_slots`` holds ``{"start_time", "end_time", "is_booked"}`` objects.
    """

    host = models.ForeignKey("users.Host", on_delete=models.CASCADE, related_name="availability")
    date = models.DateField()
    is_available = models.BooleanField(default=True)
    time_slots = models.JSONField(default=list, blank=True)

    class Meta:
        verbose_name = _("Availability day")
        verbose_name_plural = _("Availability days")
        ordering = ["date"]
        constraints = [
            models.UniqueConstraint(fields=["host", "date"], name="unique_availability_day"),
        ]

    def __str__(self) -> str:
        return f"{self.host_id} @ {self.date}"


def media_upload_to(instance: "HostMedia", filename: str) -> str:
    ext = PurePosixPath(filename).suffix.lower()
    return f"uploads/{instance.kind}s/{uuid.uuid4().hex}{ext}"


class HostMedia(models.Model):
    """A file uploaded by a host. Documents are private verification material."""

    class Kind(models.TextChoices):
        IMAGE = "image", _("Image")
        VIDEO = "video", _("Video")
        DOCUMENT = "document", _("Verification document")

    host = models.ForeignKey("users.Host", on_delete=models.CASCADE, related_name="media")
    kind = models.CharField(max_length=10, choices=Kind.choices)
    file = models.FileField(upload_to=media_upload_to, max_length=255)
    original_name = models.CharField(max_length=255, blank=True)
    size = models.PositiveBigIntegerField(default=0)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Host media")
        verbose_name_plural = _("Host media")
        ordering = ["uploaded_at", "id"]

    def __str__(self) -> str:
        return self.file.name


class HostReview(models.Model):
    host = models.ForeignKey("users.Host", on_delete=models.CASCADE, related_name="reviews")
    user = models.ForeignKey("users.User", on_delete=models.CASCADE, related_name="host_reviews")
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Review")
        verbose_name_plural = _("Reviews")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.rating}/5 for {self.host_id}"
