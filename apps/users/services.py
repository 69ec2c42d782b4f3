"""Identity operations: registration, verification codes and login."""

from __future__ import annotations

import logging
from typing import Any

from django.conf import settings  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import exceptions  # type: ignore

from apps.listings.models import ServiceOffering
from apps.notifications.services import send_email_notification, send_sms_notification
from shared.exceptions import Conflict, InvalidCredentials

from .models import PrincipalBase, VerificationCode, get_principal_model

logger = logging.getLogger(__name__)

DUPLICATE_CONTACT_MESSAGE = "An account with this email or mobile number already exists."


def register_principal(
    kind: str,
    email: str,
    password: str,
    services: list[str] | None = None,
    **profile: Any,
) -> PrincipalBase:
    """Create a principal of ``kind`` and deliver its verification codes.

    ``services`` lists the service codes a host offers.

    Raises ``Conflict`` when the email or the mobile number is already used
    by a principal of the same kind.
    """
    model = get_principal_model(kind)
    if model.objects.contact_taken(email, profile.get("mobile_number", "")):
        raise Conflict(DUPLICATE_CONTACT_MESSAGE)

    try:
        with transaction.atomic():
            principal = model.objects.create_principal(email=email, password=password, **profile)
            if services:
                principal.services.set(ServiceOffering.objects.for_codes(services))
            codes = VerificationCode.issue_for(principal)
    except IntegrityError:
        # lost a race against a concurrent registration with the same contact
        raise Conflict(DUPLICATE_CONTACT_MESSAGE)

    deliver_verification_codes(principal, codes)
    logger.info("Registered %s %s", kind, principal.pk)
    return principal


def deliver_verification_codes(principal: PrincipalBase, codes: VerificationCode) -> None:
    ttl = settings.VERIFICATION_CODE_TTL_MINUTES
    send_email_notification(
        principal.email,
        "EventO - Email Verification",
        f"Your email verification code is: {codes.email_code}\n\n"
        f"This code is valid for {ttl} minutes.",
    )
    send_sms_notification(
        principal.mobile_number,
        f"Your EventO verification code is: {codes.mobile_code}. Valid for {ttl} minutes.",
    )


def verify_contact(email: str, code: str, channel: str, kind: str | None = None) -> PrincipalBase:
    """Consume a verification code for one channel.

    The pending record is looked up by email (optionally narrowed to one
    principal kind) and must not be expired. The channel flag is set on the
    principal; once both channels are verified the principal becomes
    verified and the record is deleted.
    """
    candidates = VerificationCode.objects.filter(email__iexact=email, expires_at__gt=timezone.now())
    if kind:
        candidates = candidates.filter(principal_kind=kind)
    if not candidates.exists():
        raise exceptions.ValidationError({"otp": "Verification code expired or not found."})

    with transaction.atomic():
        record = next(
            (
                candidate
                for candidate in candidates.select_for_update()
                if not candidate.is_channel_verified(channel) and candidate.code_for(channel) == code
            ),
            None,
        )
        if record is None:
            raise exceptions.ValidationError({"otp": "Invalid verification code."})

        record.mark_verified(channel)
        principal = record.get_principal()
        principal.mark_channel_verified(channel)
        if record.is_complete:
            record.delete()

    logger.info("Verified %s channel for %s %s", channel, principal.kind, principal.pk)
    return principal


def authenticate_principal(kind: str, email: str, password: str) -> PrincipalBase:
    model = get_principal_model(kind)
    principal = model.objects.filter(email__iexact=email).first()
    if principal is None or not principal.check_password(password):
        raise InvalidCredentials()
    return principal


def purge_expired_codes() -> int:
    deleted, _ = VerificationCode.objects.filter(expires_at__lte=timezone.now()).delete()
    return deleted
