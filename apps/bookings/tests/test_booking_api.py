"""Integration tests for booking creation, visibility and deletion."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.core import mail
from django.core.exceptions import ValidationError
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.notifications import sms
from apps.notifications.models import NotificationDispatch
from apps.payments.models import Payment
from apps.users.models import Host, User
from shared.exceptions import api_exception_handler


def make_user(email: str, mobile: str, **extra) -> User:
    return User.objects.create_principal(
        email=email, password="secret123", full_name=email.split("@")[0], mobile_number=mobile, **extra
    )


def make_host(email: str, mobile: str, host_type: str, **extra) -> Host:
    defaults = {
        "business_name": email.split("@")[0].title(),
        "owner_name": "Owner",
        "host_type": host_type,
        "city": "Jaipur",
        "is_verified": True,
    }
    if host_type == Host.HostType.VENUE:
        defaults.update(venue_type=Host.VenueType.LAWN, max_guest_capacity=400)
    defaults.update(extra)
    return Host.objects.create_principal(email=email, password="secret123", mobile_number=mobile, **defaults)


def day(offset: timedelta) -> str:
    return (timezone.localtime() + offset).date().isoformat()


class BookingCreationTests(APITestCase):
    def setUp(self) -> None:
        sms.outbox.clear()
        self.user = make_user("neha@example.com", "+919700000001")
        self.venue = make_host("palace@example.com", "+919700000002", Host.HostType.VENUE)
        self.caterer = make_host("tandoor@example.com", "+919700000003", Host.HostType.CATERER)
        self.url = reverse("booking-list")
        self.client.force_authenticate(self.user)

    def payload(self, **overrides) -> dict:
        data = {
            "venue": str(self.venue.pk),
            "services": [
                {
                    "service_provider": str(self.caterer.pk),
                    "service_type": "catering",
                    "details": "Dinner buffet for 200",
                    "price": "80000.00",
                }
            ],
            "event_details": {
                "event_type": "wedding",
                "guest_count": 200,
                "start_date": day(timedelta(days=30)),
                "end_date": day(timedelta(days=31)),
            },
            "customer_details": {"name": "Neha Sharma", "contact_number": "+919700000001"},
            "amenities": [{"name": "DJ", "price": "5000"}],
            "payment": {
                "total_amount": "200000.00",
                "advance_amount": "50000.00",
                "payment_method": "online_payment",
            },
        }
        data.update(overrides)
        return data

    def test_user_creates_pending_booking(self) -> None:
        response = self.client.post(self.url, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        data = response.data["data"]
        self.assertEqual(data["status"], "pending")
        self.assertFalse(data["is_service_only"])
        self.assertEqual(data["venue"]["id"], self.venue.pk)
        self.assertEqual(data["services"][0]["service_provider"]["id"], self.caterer.pk)
        self.assertEqual(data["customer_details"]["name"], "Neha Sharma")
        self.assertEqual(data["amenities"], [{"name": "DJ", "price": "5000.00"}])

        payment = Payment.objects.get(booking_id=data["id"])
        self.assertEqual(payment.remaining_amount, Decimal("150000.00"))
        self.assertEqual(payment.currency, "inr")
        self.assertFalse(payment.is_paid)

    def test_creation_notifies_user_venue_and_provider(self) -> None:
        response = self.client.post(self.url, self.payload(), format="json")

        subjects = sorted(message.subject for message in mail.outbox)
        self.assertEqual(
            subjects,
            [
                "EventO - Booking Confirmation",
                "EventO - New Booking Request",
                "EventO - New Service Request",
            ],
        )
        self.assertEqual(
            sorted(message.to for message in sms.outbox),
            ["+919700000001", "+919700000002", "+919700000003"],
        )
        booking = Booking.objects.get(pk=response.data["data"]["id"])
        self.assertTrue(booking.email_sent)
        self.assertTrue(booking.sms_sent)
        self.assertEqual(NotificationDispatch.objects.get(booking=booking).recipients, 3)

    def test_service_only_booking(self) -> None:
        response = self.client.post(self.url, self.payload(venue=None), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["data"]["is_service_only"])
        self.assertIsNone(response.data["data"]["venue"])

    def test_booking_needs_venue_or_services(self) -> None:
        response = self.client.post(self.url, self.payload(venue=None, services=[]), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Booking.objects.exists())

    def test_start_date_beyond_three_months_is_rejected(self) -> None:
        too_far = timezone.localtime() + relativedelta(months=3) + timedelta(days=2)
        payload = self.payload(
            event_details={
                "event_type": "birthday",
                "guest_count": 20,
                "start_date": too_far.date().isoformat(),
                "end_date": (too_far + timedelta(days=1)).date().isoformat(),
            }
        )

        response = self.client.post(self.url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("start_date", response.data["error"])
        self.assertFalse(Booking.objects.exists())
        self.assertEqual(mail.outbox, [])

    def test_end_date_before_start_date(self) -> None:
        payload = self.payload(
            event_details={
                "event_type": "birthday",
                "guest_count": 20,
                "start_date": day(timedelta(days=10)),
                "end_date": day(timedelta(days=9)),
            }
        )

        response = self.client.post(self.url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unverified_venue_is_not_found(self) -> None:
        Host.objects.filter(pk=self.venue.pk).update(is_verified=False)

        response = self.client.post(self.url, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_malformed_venue_id_is_not_found(self) -> None:
        response = self.client.post(self.url, self.payload(venue="not-an-id"), format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data["success"])

    def test_provider_must_match_service_type(self) -> None:
        services = [{"service_provider": str(self.caterer.pk), "service_type": "decoration"}]

        response = self.client.post(self.url, self.payload(services=services), format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_hosts_cannot_create_bookings(self) -> None:
        self.client.force_authenticate(self.venue)

        response = self.client.post(self.url, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_advance_cannot_exceed_total(self) -> None:
        payment = {"total_amount": "100", "advance_amount": "200", "payment_method": "upi"}

        response = self.client.post(self.url, self.payload(payment=payment), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class BookingModelGuardTests(APITestCase):
    def setUp(self) -> None:
        self.user = make_user("guard@example.com", "+919700000010")

    def _booking(self, start):
        return Booking(
            user=self.user,
            is_service_only=True,
            event_type=Booking.EventType.CORPORATE,
            guest_count=50,
            start_date=start,
            end_date=start + timedelta(hours=6),
            customer_name="Guard",
            customer_contact_number="+919700000010",
        )

    def test_save_rejects_start_beyond_limit(self) -> None:
        booking = self._booking(timezone.now() + relativedelta(months=3) + timedelta(days=1))

        with self.assertRaises(ValidationError) as caught:
            booking.save()

        self.assertIn("start_date", caught.exception.message_dict)
        self.assertFalse(Booking.objects.exists())

    def test_existing_booking_can_be_saved_later(self) -> None:
        booking = self._booking(timezone.now() + timedelta(days=80))
        booking.save()

        booking.special_requests = "Vegan options"
        booking.save()

        self.assertEqual(Booking.objects.get().special_requests, "Vegan options")

    def test_model_maps_to_bad_request_through_api_handler(self) -> None:
        error = ValidationError({"start_date": "too far"})
        response = api_exception_handler(error, {})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {"success": False, "error": {"start_date": ["too far"]}})


class BookingVisibilityTests(APITestCase):
    def setUp(self) -> None:
        self.owner = make_user("owner@example.com", "+919700000020")
        self.stranger = make_user("stranger@example.com", "+919700000021")
        self.venue = make_host("hall@example.com", "+919700000022", Host.HostType.VENUE)
        self.other_venue = make_host("hall2@example.com", "+919700000023", Host.HostType.VENUE)
        self.admin = make_user("admin@example.com", "+919700000024", role=User.RoleChoices.ADMIN)
        start = timezone.now() + timedelta(days=20)
        self.booking = Booking.objects.create(
            user=self.owner,
            venue=self.venue,
            event_type=Booking.EventType.BIRTHDAY,
            guest_count=30,
            start_date=start,
            end_date=start + timedelta(hours=5),
            customer_name="Owner",
            customer_contact_number="+919700000020",
        )
        Payment.objects.create(
            booking=self.booking,
            total_amount=Decimal("1000"),
            advance_amount=Decimal("500"),
            remaining_amount=Decimal("500"),
            method=Payment.Method.UPI,
        )

    def test_user_lists_only_own_bookings(self) -> None:
        self.client.force_authenticate(self.stranger)
        self.assertEqual(self.client.get(reverse("booking-list")).data["total"], 0)

        self.client.force_authenticate(self.owner)
        response = self.client.get(reverse("booking-list"))
        self.assertEqual(response.data["total"], 1)
        self.assertEqual(response.data["data"][0]["id"], self.booking.pk)

    def test_host_lists_bookings_referencing_it(self) -> None:
        self.client.force_authenticate(self.venue)
        self.assertEqual(self.client.get(reverse("booking-list")).data["total"], 1)

        self.client.force_authenticate(self.other_venue)
        self.assertEqual(self.client.get(reverse("booking-list")).data["total"], 0)

    def test_list_filters(self) -> None:
        self.client.force_authenticate(self.owner)

        confirmed = self.client.get(reverse("booking-list"), {"status": "confirmed"})
        pending = self.client.get(reverse("booking-list"), {"status": "pending"})
        later = self.client.get(reverse("booking-list"), {"start_date": day(timedelta(days=60))})

        self.assertEqual(confirmed.data["total"], 0)
        self.assertEqual(pending.data["total"], 1)
        self.assertEqual(later.data["total"], 0)

    def test_stranger_cannot_retrieve(self) -> None:
        self.client.force_authenticate(self.stranger)

        response = self.client.get(reverse("booking-detail", args=[self.booking.pk]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_referenced_host_retrieves(self) -> None:
        self.client.force_authenticate(self.venue)

        response = self.client.get(reverse("booking-detail", args=[self.booking.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["payment"]["advance_amount"], "500.00")

    def test_only_admin_deletes(self) -> None:
        self.client.force_authenticate(self.owner)
        denied = self.client.delete(reverse("booking-detail", args=[self.booking.pk]))
        self.assertEqual(denied.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        deleted = self.client.delete(reverse("booking-detail", args=[self.booking.pk]))
        self.assertEqual(deleted.status_code, status.HTTP_200_OK)
        self.assertFalse(Booking.objects.exists())
        self.assertFalse(Payment.objects.exists())

    def test_venue_referenced_by_booking_cannot_be_deleted(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.delete(reverse("venue-detail", args=[self.venue.pk]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Host.objects.filter(pk=self.venue.pk).exists())
