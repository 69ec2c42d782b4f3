"""Principal models for EventO.

The marketplace has two independent kinds of principal: a *user* who books
events and a *host* who offers a venue or a service (catering, decoration,
organization). Both kinds authenticate the same way, so they share an
abstract base that carries the credential, the contact details and the
verification flags, and each concrete model adds its own profile. Email and
mobile number are unique within a kind only: a person may hold a user and a
host account with the same email.

Every principal carries a ``kind`` discriminant which is embedded into the
signed credential, letting authorization tell the two apart without a second
lookup.
"""

from __future__ import annotations

import secrets
from datetime import timedelta
from typing import Any

from django.conf import settings  # type: ignore
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator, RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


PHONE_VALIDATOR = RegexValidator(
    regex=r"^\+?\d{7,15}$",
    message=_("Invalid phone number. Use digits only, optionally prefixed with +."),
)


class PrincipalKind(models.TextChoices):
    USER = "user", _("User")
    HOST = "host", _("Host")


class PrincipalManager(BaseUserManager):
    """Manager shared by both principal kinds, email is the login."""

    use_in_migrations = True

    def create_principal(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email is required.")
        email = self.normalize_email(email).lower()

        mobile = extra_fields.get("mobile_number")
        if mobile:
            extra_fields["mobile_number"] = self.normalize_phone(mobile)

        principal = self.model(email=email, **extra_fields)
        if password:
            principal.set_password(password)
        else:
            principal.set_unusable_password()
        principal.save(using=self._db)
        return principal

    def contact_taken(self, email: str, mobile_number: str) -> bool:
        return self.filter(
            models.Q(email__iexact=email) | models.Q(mobile_number=self.normalize_phone(mobile_number))
        ).exists()

    @staticmethod
    def normalize_phone(phone: str) -> str:
        """Strip spaces and dashes so numbers compare equal however typed."""
        return phone.replace(" ", "").replace("-", "")


class PrincipalBase(AbstractBaseUser):
    kind: str = ""

    email = models.EmailField(_("Email"), unique=True)
    mobile_number = models.CharField(
        _("Mobile number"),
        max_length=20,
        unique=True,
        validators=[PHONE_VALIDATOR],
    )
    address = models.TextField(_("Address"), blank=True)
    email_verified = models.BooleanField(_("Email verified"), default=False)
    mobile_verified = models.BooleanField(_("Mobile verified"), default=False)
    is_verified = models.BooleanField(_("Verified"), default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PrincipalManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["mobile_number"]

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    @property
    def is_user(self) -> bool:
        return self.kind == PrincipalKind.USER

    @property
    def is_host(self) -> bool:
        return self.kind == PrincipalKind.HOST

    @property
    def is_admin(self) -> bool:
        return False

    @property
    def display_name(self) -> str:
        return self.email

    def mark_channel_verified(self, channel: str) -> None:
        if channel == VerificationCode.Channel.EMAIL:
            self.email_verified = True
        else:
            self.mobile_verified = True
        if self.email_verified and self.mobile_verified:
            self.is_verified = True
        self.save(update_fields=["email_verified", "mobile_verified", "is_verified", "updated_at"])


class User(PrincipalBase):
    """Customer account that books venues and services."""

    kind = PrincipalKind.USER

    class RoleChoices(models.TextChoices):
        USER = "user", _("User")
        ADMIN = "admin", _("Administrator")

    full_name = models.CharField(_("Full name"), max_length=255)
    role = models.CharField(
        _("Role"),
        max_length=10,
        choices=RoleChoices.choices,
        default=RoleChoices.USER,
    )

    class Meta(PrincipalBase.Meta):
        verbose_name = _("User")
        verbose_name_plural = _("Users")

    def __str__(self) -> str:
        return f"{self.full_name} <{self.email}>"

    @property
    def is_admin(self) -> bool:
        return self.role == self.RoleChoices.ADMIN

    @property
    def display_name(self) -> str:
        return self.full_name


class Host(PrincipalBase):
    """Venue or service-provider account.

    ``host_type`` selects which part of the profile is meaningful: venues
    carry a venue type and a guest capacity, caterers a menu, decorators
    decoration categories and organizers the event types and services they
    organize. The per-type catalogue entries live in ``apps.listings``.
    """

    kind = PrincipalKind.HOST

    class HostType(models.TextChoices):
        VENUE = "venue", _("Venue")
        CATERER = "caterer", _("Caterer")
        DECORATOR = "decorator", _("Decorator")
        ORGANIZER = "organizer", _("Organizer")

    class VenueType(models.TextChoices):
        LAWN = "lawn", _("Lawn")
        BANQUET = "banquet", _("Banquet hall")
        CAFE = "cafe", _("Cafe")
        HOTEL = "hotel", _("Hotel")
        RESORT = "resort", _("Resort")
        OTHER = "other", _("Other")

    business_name = models.CharField(_("Business name"), max_length=255)
    owner_name = models.CharField(_("Owner name"), max_length=255)
    host_type = models.CharField(_("Host type"), max_length=20, choices=HostType.choices)
    city = models.CharField(_("City"), max_length=100)
    zip_code = models.CharField(_("ZIP code"), max_length=12, blank=True)

    # Venue profile
    venue_type = models.CharField(_("Venue type"), max_length=20, choices=VenueType.choices, blank=True)
    max_guest_capacity = models.PositiveIntegerField(_("Max guest capacity"), null=True, blank=True)

    # Caterer profile
    vegetarian_menu = models.BooleanField(_("Vegetarian menu"), default=False)
    non_vegetarian_menu = models.BooleanField(_("Non-vegetarian menu"), default=False)

    # Organizer profile
    event_types = models.JSONField(_("Organized event types"), default=list, blank=True)

    services = models.ManyToManyField(
        "listings.ServiceOffering",
        blank=True,
        related_name="hosts",
        verbose_name=_("Services offered"),
    )

    # Pricing
    base_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    price_per_hour = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    price_per_day = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    cleaning_fee = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    security_deposit = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    # Payout
    accepts_bank_transfer = models.BooleanField(default=False)
    accepts_upi = models.BooleanField(default=False)
    accepts_online_payment = models.BooleanField(default=False)
    bank_account_number = models.CharField(max_length=34, blank=True)
    bank_ifsc_code = models.CharField(max_length=11, blank=True)
    bank_account_holder = models.CharField(max_length=255, blank=True)
    bank_name = models.CharField(max_length=255, blank=True)
    upi_id = models.CharField(_("UPI ID"), max_length=100, blank=True)
    advance_percentage = models.PositiveSmallIntegerField(
        _("Advance percentage"),
        default=50,
        validators=[MaxValueValidator(100)],
    )

    # Set by administrators, never derived from reviews.
    rating = models.DecimalField(
        max_digits=3,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )

    class Meta(PrincipalBase.Meta):
        verbose_name = _("Host")
        verbose_name_plural = _("Hosts")
        indexes = [
            models.Index(fields=["host_type", "city"]),
        ]

    def __str__(self) -> str:
        return f"{self.business_name} ({self.get_host_type_display()})"

    @property
    def display_name(self) -> str:
        return self.business_name

    def clean(self) -> None:
        super().clean()
        if self.host_type == self.HostType.VENUE:
            errors = {}
            if not self.venue_type:
                errors["venue_type"] = _("Venue type is required for venues.")
            if not self.max_guest_capacity:
                errors["max_guest_capacity"] = _("Maximum guest capacity is required for venues.")
            if errors:
                raise ValidationError(errors)


PRINCIPAL_MODELS: dict[str, type[PrincipalBase]] = {
    PrincipalKind.USER: User,
    PrincipalKind.HOST: Host,
}


def get_principal_model(kind: str) -> type[PrincipalBase]:
    try:
        return PRINCIPAL_MODELS[kind]
    except KeyError:
        raise ValueError(f"Unknown principal kind: {kind!r}") from None


def generate_code() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


class VerificationCode(models.Model):
    """Pending one-time codes proving ownership of a principal's email and mobile.

    Each channel has its own code and its own ``verified`` flag. The row is
    removed once both channels are verified, and rows past ``expires_at``
    are ignored and purged periodically.
    """

    class Channel(models.TextChoices):
        EMAIL = "email", _("Email")
        MOBILE = "mobile", _("Mobile")

    principal_kind = models.CharField(max_length=10, choices=PrincipalKind.choices)
    principal_id = models.PositiveBigIntegerField()
    email = models.EmailField(db_index=True)
    email_code = models.CharField(max_length=6)
    mobile_code = models.CharField(max_length=6)
    email_verified = models.BooleanField(default=False)
    mobile_verified = models.BooleanField(default=False)
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Verification code")
        verbose_name_plural = _("Verification codes")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["principal_kind", "principal_id"],
                name="unique_verification_per_principal",
            ),
        ]

    def __str__(self) -> str:
        return f"Verification for {self.principal_kind}:{self.principal_id}"

    @classmethod
    def issue_for(cls, principal: PrincipalBase) -> "VerificationCode":
        ttl = timedelta(minutes=settings.VERIFICATION_CODE_TTL_MINUTES)
        record, _created = cls.objects.update_or_create(
            principal_kind=principal.kind,
            principal_id=principal.pk,
            defaults={
                "email": principal.email,
                "email_code": generate_code(),
                "mobile_code": generate_code(),
                "email_verified": principal.email_verified,
                "mobile_verified": principal.mobile_verified,
                "expires_at": timezone.now() + ttl,
            },
        )
        return record

    @property
    def is_expired(self) -> bool:
        return timezone.now() >= self.expires_at

    @property
    def is_complete(self) -> bool:
        return self.email_verified and self.mobile_verified

    def code_for(self, channel: str) -> str:
        return self.email_code if channel == self.Channel.EMAIL else self.mobile_code

    def is_channel_verified(self, channel: str) -> bool:
        return self.email_verified if channel == self.Channel.EMAIL else self.mobile_verified

    def mark_verified(self, channel: str) -> None:
        if channel == self.Channel.EMAIL:
            self.email_verified = True
        else:
            self.mobile_verified = True
        self.save(update_fields=["email_verified", "mobile_verified"])

    def get_principal(self) -> PrincipalBase:
        return get_principal_model(self.principal_kind).objects.get(pk=self.principal_id)
