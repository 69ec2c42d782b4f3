"""Notification services: email, SMS and the booking party fan-out."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

import structlog
from django.conf import settings  # type: ignore
from django.core.mail import send_mail  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore
from django.utils.html import strip_tags  # type: ignore

from . import messages
from .messages import Audience
from .models import BookingEvent, NotificationDispatch
from .sms import get_sms_backend

if TYPE_CHECKING:  # pragma: no cover
    from apps.bookings.models import Booking
    from apps.users.models import PrincipalBase

logger = structlog.get_logger(__name__)


# ============================================================================
# EMAIL NOTIFICATIONS
# ============================================================================

def send_email_notification(
    recipient_email: str,
    subject: str,
    message: str,
    *,
    html_message: str | None = None,
) -> bool:
    """
    Send a single email.

    Args:
        recipient_email: recipient address
        subject: subject line
        message: plain text body, derived from ``html_message`` when empty
        html_message: optional HTML alternative

    Returns:
        bool: True when the backend accepted the message
    """
    try:
        if html_message and not message:
            message = strip_tags(html_message)

        send_mail(
            subject=subject,
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[recipient_email],
            html_message=html_message,
            fail_silently=False,
        )

        logger.info("email_sent", recipient=recipient_email, subject=subject)
        return True

    except Exception:
        logger.error("email_failed", recipient=recipient_email, subject=subject, exc_info=True)
        return False


# ============================================================================
# SMS NOTIFICATIONS
# ============================================================================

def send_sms_notification(phone_number: str, body: str) -> bool:
    """Send a text message through the configured SMS backend."""
    try:
        get_sms_backend().send(phone_number, body)
        logger.info("sms_sent", recipient=phone_number)
        return True
    except Exception:
        logger.error("sms_failed", recipient=phone_number, exc_info=True)
        return False


def send_contact_pair(principal: "PrincipalBase", subject: str, email_body: str, sms_body: str) -> dict[str, bool]:
    """Send one email and one SMS to a principal, returning per-channel results."""
    return {
        "email": send_email_notification(principal.email, subject, email_body),
        "sms": send_sms_notification(principal.mobile_number, sms_body),
    }


# ============================================================================
# BOOKING PARTY FAN-OUT
# ============================================================================

@dataclass
class Recipient:
    audience: str
    principal: "PrincipalBase"
    service_types: list[str] = field(default_factory=list)
    amount: Decimal | None = None


def _format_date(value) -> str:
    return value.strftime("%d/%m/%Y") if value else ""


def _event_key(booking: "Booking", event: str) -> str:
    if event == BookingEvent.STATUS_CHANGED:
        return f"{event}:{booking.status}"
    return event


def _collect_recipients(booking: "Booking", event: str) -> list[Recipient]:
    payment = getattr(booking, "payment", None)
    advance = payment.advance_amount if payment else None

    recipients = [Recipient(Audience.USER, booking.user, amount=advance)]

    notify_hosts = event != BookingEvent.STATUS_CHANGED or booking.status in (
        booking.Status.CANCELLED,
        booking.Status.COMPLETED,
    )
    if not notify_hosts:
        return recipients

    if booking.venue_id:
        recipients.append(Recipient(Audience.VENUE, booking.venue, amount=advance))

    providers: dict[int, Recipient] = {}
    for entry in booking.services.select_related("service_provider"):
        recipient = providers.get(entry.service_provider_id)
        if recipient is None:
            recipient = Recipient(Audience.PROVIDER, entry.service_provider, amount=Decimal("0"))
            providers[entry.service_provider_id] = recipient
        if entry.service_type not in recipient.service_types:
            recipient.service_types.append(entry.service_type)
        recipient.amount += entry.price
    recipients.extend(providers.values())
    return recipients


def _base_context(booking: "Booking", transaction_id: str | None) -> dict:
    payment = getattr(booking, "payment", None)
    return {
        "booking_id": booking.pk,
        "event_type": booking.event_type,
        "start_date": _format_date(booking.start_date),
        "end_date": _format_date(booking.end_date),
        "guest_count": booking.guest_count,
        "status": booking.status,
        "status_title": booking.status.title(),
        "total_amount": payment.total_amount if payment else "",
        "transaction_id": transaction_id or (payment.transaction_id if payment else ""),
    }


def _claim_dispatch(booking: "Booking", event: str) -> NotificationDispatch | None:
    try:
        with transaction.atomic():
            return NotificationDispatch.objects.create(
                booking=booking, event=event, event_key=_event_key(booking, event)
            )
    except IntegrityError:
        return None


def notify_parties(booking: "Booking", event: str, *, transaction_id: str | None = None) -> dict | None:
    """
    Broadcast a booking event to the user and the hosts referenced by it.

    Every event is sent at most once per booking: the dispatch ledger row is
    claimed first and a second call for the same event returns ``None``
    without sending anything. Status changes notify hosts only when the
    booking was cancelled or completed. Delivery failures are logged and
    never raised; the booking's ``email_sent``/``sms_sent`` flags are set
    when at least one message on that channel went out.

    Returns:
        dict with the number of recipients and delivered messages, or None
        when the event had already been dispatched.
    """
    dispatch = _claim_dispatch(booking, event)
    if dispatch is None:
        logger.info("fanout_skipped", booking_id=booking.pk, event_name=event, reason="already_dispatched")
        return None

    context = _base_context(booking, transaction_id)
    recipients = _collect_recipients(booking, event)
    emails = sms = 0

    for recipient in recipients:
        subject, body, sms_body = messages.render(
            event,
            recipient.audience,
            {
                **context,
                "service_type": ", ".join(recipient.service_types),
                "amount": recipient.amount if recipient.amount is not None else "",
            },
        )
        result = send_contact_pair(recipient.principal, subject, body, sms_body)
        emails += int(result["email"])
        sms += int(result["sms"])

    dispatch.recipients = len(recipients)
    dispatch.emails_delivered = emails
    dispatch.sms_delivered = sms
    dispatch.save(update_fields=["recipients", "emails_delivered", "sms_delivered"])

    booking.record_delivery(email_sent=emails > 0, sms_sent=sms > 0)

    logger.info(
        "fanout_completed",
        booking_id=booking.pk,
        event_key=dispatch.event_key,
        recipients=len(recipients),
        emails=emails,
        sms=sms,
    )
    return {"recipients": len(recipients), "emails": emails, "sms": sms}
