"""API tests for registration, contact verification and login."""

from __future__ import annotations

from datetime import timedelta

from django.core import mail
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from apps.notifications import sms
from apps.users.models import Host, User, VerificationCode


class RegistrationAPITests(APITestCase):
    def setUp(self) -> None:
        sms.outbox.clear()
        self.user_payload = {
            "full_name": "Asha Rao",
            "email": "asha@example.com",
            "mobile_number": "+919800000001",
            "password": "secret123",
        }

    def test_register_user_returns_token_and_sends_codes(self) -> None:
        response = self.client.post(
            reverse("auth:register", kwargs={"kind": "user"}), self.user_payload, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["kind"], "user")
        self.assertEqual(response.data["data"]["email"], "asha@example.com")
        self.assertNotIn("password", response.data["data"])
        self.assertIn("token", response.cookies)

        token = AccessToken(response.data["token"])
        self.assertEqual(token["kind"], "user")

        record = VerificationCode.objects.get(email="asha@example.com")
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, "EventO - Email Verification")
        self.assertIn(record.email_code, mail.outbox[0].body)
        self.assertEqual(len(sms.outbox), 1)
        self.assertIn(record.mobile_code, sms.outbox[0].body)

    def test_duplicate_email_is_conflict(self) -> None:
        url = reverse("auth:register", kwargs={"kind": "user"})
        self.client.post(url, self.user_payload, format="json")

        payload = {**self.user_payload, "mobile_number": "+919800000099"}
        response = self.client.post(url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertFalse(response.data["success"])
        self.assertEqual(User.objects.count(), 1)

    def test_same_email_may_register_as_host(self) -> None:
        self.client.post(reverse("auth:register", kwargs={"kind": "user"}), self.user_payload, format="json")
        payload = {
            "email": "asha@example.com",
            "mobile_number": "+919800000001",
            "password": "secret123",
            "business_name": "Rao Caterers",
            "owner_name": "Asha Rao",
            "host_type": "caterer",
            "city": "Pune",
            "services": ["catering"],
        }

        response = self.client.post(reverse("auth:register", kwargs={"kind": "host"}), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["kind"], "host")
        self.assertEqual(response.data["data"]["services"], ["catering"])

    def test_venue_host_requires_venue_details(self) -> None:
        payload = {
            "email": "lawn@example.com",
            "mobile_number": "+919800000002",
            "password": "secret123",
            "business_name": "Green Lawn",
            "owner_name": "Vik",
            "host_type": "venue",
            "city": "Pune",
        }

        response = self.client.post(reverse("auth:register", kwargs={"kind": "host"}), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("venue_type", response.data["error"])
        self.assertIn("max_guest_capacity", response.data["error"])
        self.assertFalse(Host.objects.exists())

    def test_missing_fields_are_reported_per_field(self) -> None:
        response = self.client.post(
            reverse("auth:register", kwargs={"kind": "user"}), {"email": "x@example.com"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("full_name", response.data["error"])
        self.assertIn("password", response.data["error"])


class VerificationAPITests(APITestCase):
    def setUp(self) -> None:
        sms.outbox.clear()
        self.client.post(
            reverse("auth:register", kwargs={"kind": "user"}),
            {
                "full_name": "Ravi",
                "email": "ravi@example.com",
                "mobile_number": "+919811111111",
                "password": "secret123",
            },
            format="json",
        )
        self.record = VerificationCode.objects.get(email="ravi@example.com")
        self.url = reverse("auth:verify-otp")

    def _verify(self, code: str, channel: str):
        return self.client.post(
            self.url, {"email": "ravi@example.com", "otp": code, "type": channel}, format="json"
        )

    def test_both_channels_verify_the_user(self) -> None:
        first = self._verify(self.record.email_code, "email")
        self.assertEqual(first.status_code, status.HTTP_200_OK, first.data)
        self.assertTrue(first.data["data"]["email_verified"])
        self.assertFalse(first.data["data"]["is_verified"])

        second = self._verify(self.record.mobile_code, "mobile")
        self.assertEqual(second.status_code, status.HTTP_200_OK, second.data)
        self.assertTrue(second.data["data"]["is_verified"])

        user = User.objects.get(email="ravi@example.com")
        self.assertTrue(user.is_verified)
        self.assertFalse(VerificationCode.objects.exists())

    def test_wrong_code_is_rejected(self) -> None:
        wrong = "000000" if self.record.email_code != "000000" else "111111"

        response = self._verify(wrong, "email")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(User.objects.get(email="ravi@example.com").email_verified)

    def test_code_cannot_be_reused(self) -> None:
        self._verify(self.record.email_code, "email")

        response = self._verify(self.record.email_code, "email")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_expired_code_is_rejected(self) -> None:
        VerificationCode.objects.filter(pk=self.record.pk).update(
            expires_at=timezone.now() - timedelta(seconds=1)
        )

        response = self._verify(self.record.email_code, "email")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("expired", str(response.data["error"]))


class LoginAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_principal(
            email="meera@example.com",
            password="secret123",
            full_name="Meera",
            mobile_number="+919822222222",
        )

    def test_login_sets_token_with_kind(self) -> None:
        response = self.client.post(
            reverse("auth:login", kwargs={"kind": "user"}),
            {"email": "meera@example.com", "password": "secret123"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        token = AccessToken(response.data["token"])
        self.assertEqual(token["kind"], "user")
        self.assertEqual(str(token["user_id"]), str(self.user.pk))

    def test_wrong_password_is_unauthorized(self) -> None:
        response = self.client.post(
            reverse("auth:login", kwargs={"kind": "user"}),
            {"email": "meera@example.com", "password": "nope123"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data["success"])

    def test_user_credentials_do_not_open_host_login(self) -> None:
        response = self.client.post(
            reverse("auth:login", kwargs={"kind": "host"}),
            {"email": "meera@example.com", "password": "secret123"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_accepts_bearer_header_and_cookie(self) -> None:
        login = self.client.post(
            reverse("auth:login", kwargs={"kind": "user"}),
            {"email": "meera@example.com", "password": "secret123"},
            format="json",
        )
        token = login.data["token"]

        # cookie set by the login response
        by_cookie = self.client.get(reverse("auth:me"))
        self.assertEqual(by_cookie.status_code, status.HTTP_200_OK, by_cookie.data)
        self.assertEqual(by_cookie.data["kind"], "user")
        self.assertNotIn("isHost", by_cookie.data)

        self.client.cookies.clear()
        by_header = self.client.get(reverse("auth:me"), HTTP_AUTHORIZATION=f"Bearer {token}")
        self.assertEqual(by_header.status_code, status.HTTP_200_OK)
        self.assertEqual(by_header.data["data"]["email"], "meera@example.com")

    def test_logout_clears_cookie(self) -> None:
        self.client.post(
            reverse("auth:login", kwargs={"kind": "user"}),
            {"email": "meera@example.com", "password": "secret123"},
            format="json",
        )

        response = self.client.get(reverse("auth:logout"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.cookies["token"].value, "none")

        me = self.client.get(reverse("auth:me"))
        self.assertEqual(me.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_host_token_resolves_to_host(self) -> None:
        host = Host.objects.create_principal(
            email="meera@example.com",
            password="secret123",
            business_name="Meera Decor",
            owner_name="Meera",
            host_type=Host.HostType.DECORATOR,
            city="Pune",
            mobile_number="+919822222222",
        )
        login = self.client.post(
            reverse("auth:login", kwargs={"kind": "host"}),
            {"email": "meera@example.com", "password": "secret123"},
            format="json",
        )
        self.client.cookies.clear()

        me = self.client.get(reverse("auth:me"), HTTP_AUTHORIZATION=f"Bearer {login.data['token']}")

        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.data["kind"], "host")
        self.assertEqual(me.data["data"]["id"], host.pk)
