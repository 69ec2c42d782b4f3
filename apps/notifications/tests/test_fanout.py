"""Tests for the booking notification fan-out and SMS backends."""

from __future__ import annotations

import io
import logging
from datetime import timedelta
from decimal import Decimal
from unittest import mock

import pytest
import structlog
from django.core import mail
from django.test import TestCase, override_settings
from django.utils import timezone
from structlog.testing import LogCapture

from apps.bookings.models import Booking, BookingService
from apps.notifications import sms
from apps.notifications.models import BookingEvent, NotificationDispatch
from apps.notifications.services import notify_parties, send_email_notification, send_sms_notification
from apps.payments.models import Payment
from apps.users.models import Host, User


class NotifyPartiesTests(TestCase):
    def setUp(self) -> None:
        sms.outbox.clear()
        self.user = User.objects.create_principal(
            email="dia@example.com", password="secret123", full_name="Dia", mobile_number="+919300000001"
        )
        self.caterer = Host.objects.create_principal(
            email="feast@example.com",
            password="secret123",
            mobile_number="+919300000002",
            business_name="Feast",
            owner_name="Om",
            host_type=Host.HostType.CATERER,
            city="Chennai",
        )
        start = timezone.now() + timedelta(days=5)
        self.booking = Booking.objects.create(
            user=self.user,
            is_service_only=True,
            event_type=Booking.EventType.CULTURAL,
            guest_count=120,
            start_date=start,
            end_date=start + timedelta(hours=4),
            customer_name="Dia",
            customer_contact_number="+919300000001",
        )
        for price in ("1000", "2500"):
            BookingService.objects.create(
                booking=self.booking,
                service_provider=self.caterer,
                service_type=BookingService.ServiceType.CATERING,
                price=Decimal(price),
            )
        Payment.objects.create(
            booking=self.booking,
            total_amount=Decimal("3500"),
            advance_amount=Decimal("1000"),
            remaining_amount=Decimal("2500"),
            method=Payment.Method.UPI,
        )

    def test_provider_listed_twice_is_notified_once_with_summed_price(self) -> None:
        result = notify_parties(self.booking, BookingEvent.PAID, transaction_id="T-1")

        self.assertEqual(result, {"recipients": 2, "emails": 2, "sms": 2})
        provider_mail = next(message for message in mail.outbox if message.to == ["feast@example.com"])
        self.assertIn("Amount: 3500.00", provider_mail.body)
        self.assertIn("Transaction ID: T-1", provider_mail.body)

    def test_same_event_is_dispatched_once(self) -> None:
        self.assertIsNotNone(notify_parties(self.booking, BookingEvent.CREATED))
        self.assertIsNone(notify_parties(self.booking, BookingEvent.CREATED))

        self.assertEqual(len(mail.outbox), 2)
        self.assertEqual(NotificationDispatch.objects.filter(booking=self.booking).count(), 1)

    def test_fanout_outcomes_are_logged(self) -> None:
        capture = LogCapture()
        logger = structlog.stdlib.BoundLogger(logging.getLogger(__name__), [capture], {})
        with mock.patch("apps.notifications.services.logger", logger):
            notify_parties(self.booking, BookingEvent.CREATED)
            notify_parties(self.booking, BookingEvent.CREATED)

        fanouts = [entry for entry in capture.entries if entry["event"].startswith("fanout_")]
        self.assertEqual([entry["event"] for entry in fanouts], ["fanout_completed", "fanout_skipped"])
        self.assertEqual(fanouts[0]["event_key"], "created")
        self.assertEqual(fanouts[0]["recipients"], 2)
        self.assertEqual(fanouts[1]["event_name"], "created")

    def test_each_status_is_a_separate_event(self) -> None:
        Booking.objects.filter(pk=self.booking.pk).update(status=Booking.Status.CONFIRMED)
        self.booking.refresh_from_db()
        notify_parties(self.booking, BookingEvent.STATUS_CHANGED)

        Booking.objects.filter(pk=self.booking.pk).update(status=Booking.Status.COMPLETED)
        self.booking.refresh_from_db()
        notify_parties(self.booking, BookingEvent.STATUS_CHANGED)

        keys = set(NotificationDispatch.objects.values_list("event_key", flat=True))
        self.assertEqual(keys, {"status_changed:confirmed", "status_changed:completed"})
        # confirmation reaches the user only, completion everyone
        self.assertEqual(len(mail.outbox), 3)

    def test_delivery_failure_does_not_raise(self) -> None:
        with mock.patch("apps.notifications.services.send_mail", side_effect=ConnectionError("smtp down")):
            result = notify_parties(self.booking, BookingEvent.CREATED)

        self.assertEqual(result["emails"], 0)
        self.assertEqual(result["sms"], 2)
        self.booking.refresh_from_db()
        self.assertFalse(self.booking.email_sent)
        self.assertTrue(self.booking.sms_sent)


class SMSBackendTests(TestCase):
    def test_locmem_backend_collects_messages(self) -> None:
        sms.outbox.clear()

        self.assertTrue(send_sms_notification("+919300000009", "hello"))

        self.assertEqual(sms.outbox, [sms.SMSMessage(to="+919300000009", body="hello")])

    def test_console_backend_writes_to_stream(self) -> None:
        stream = io.StringIO()

        sms.ConsoleSMSBackend(stream=stream).send("+919300000009", "hi")

        self.assertEqual(stream.getvalue(), "SMS to +919300000009: hi\n")

    @override_settings(SMS_BACKEND="apps.notifications.sms.TwilioSMSBackend")
    def test_twilio_failure_is_reported_as_undelivered(self) -> None:
        with mock.patch("twilio.rest.Client") as client_cls:
            client_cls.return_value.messages.create.side_effect = RuntimeError("twilio down")

            self.assertFalse(send_sms_notification("+919300000009", "hi"))


@pytest.mark.django_db
def test_html_only_email_gets_plain_text_body() -> None:
    assert send_email_notification("a@example.com", "Subject", "", html_message="<p>Hello <b>there</b></p>")

    assert mail.outbox[-1].body == "Hello there"
    assert mail.outbox[-1].alternatives[0][1] == "text/html"
