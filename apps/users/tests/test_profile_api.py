"""Tests for user profile endpoints and the admin user list."""

from __future__ import annotations

from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import Host, User, VerificationCode
from apps.users.services import purge_expired_codes
from apps.users.tasks import purge_expired_verification_codes


class UserProfileAPITests(APITestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_principal(
            email="kiran@example.com",
            password="secret123",
            full_name="Kiran",
            mobile_number="+919833333333",
        )
        self.url = reverse("user-profile")

    def test_get_own_profile(self) -> None:
        self.client.force_authenticate(self.user)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["full_name"], "Kiran")

    def test_update_profile(self) -> None:
        self.client.force_authenticate(self.user)

        response = self.client.put(self.url, {"full_name": "Kiran K", "address": "MG Road"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.user.refresh_from_db()
        self.assertEqual(self.user.full_name, "Kiran K")
        self.assertEqual(self.user.address, "MG Road")

    def test_mobile_number_taken_by_another_user(self) -> None:
        User.objects.create_principal(
            email="other@example.com",
            password="secret123",
            full_name="Other",
            mobile_number="+919844444444",
        )
        self.client.force_authenticate(self.user)

        response = self.client.put(self.url, {"mobile_number": "+919844444444"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_hosts_have_no_user_profile(self) -> None:
        host = Host.objects.create_principal(
            email="host@example.com",
            password="secret123",
            business_name="Spice Route",
            owner_name="Dev",
            host_type=Host.HostType.CATERER,
            city="Mumbai",
            mobile_number="+919855555555",
        )
        self.client.force_authenticate(host)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_user_list_is_admin_only(self) -> None:
        self.client.force_authenticate(self.user)
        self.assertEqual(self.client.get(reverse("user-list")).status_code, status.HTTP_403_FORBIDDEN)

        admin = User.objects.create_principal(
            email="admin@example.com",
            password="secret123",
            full_name="Admin",
            mobile_number="+919866666666",
            role=User.RoleChoices.ADMIN,
        )
        self.client.force_authenticate(admin)
        response = self.client.get(reverse("user-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], 2)


@pytest.mark.django_db
def test_purge_removes_only_expired_codes() -> None:
    fresh = User.objects.create_principal(
        email="fresh@example.com", password="x12345", full_name="Fresh", mobile_number="+919870000001"
    )
    stale = User.objects.create_principal(
        email="stale@example.com", password="x12345", full_name="Stale", mobile_number="+919870000002"
    )
    VerificationCode.issue_for(fresh)
    expired = VerificationCode.issue_for(stale)
    VerificationCode.objects.filter(pk=expired.pk).update(expires_at=timezone.now() - timedelta(minutes=1))

    assert purge_expired_codes() == 1
    assert list(VerificationCode.objects.values_list("email", flat=True)) == ["fresh@example.com"]


@pytest.mark.django_db
def test_reissue_replaces_pending_codes() -> None:
    user = User.objects.create_principal(
        email="again@example.com", password="x12345", full_name="Again", mobile_number="+919870000003"
    )
    first = VerificationCode.issue_for(user)
    second = VerificationCode.issue_for(user)

    assert VerificationCode.objects.count() == 1
    assert second.pk == first.pk
    assert second.expires_at >= first.expires_at


@pytest.mark.django_db
def test_purge_task_runs_eagerly() -> None:
    user = User.objects.create_principal(
        email="task@example.com", password="x12345", full_name="Task", mobile_number="+919870000004"
    )
    record = VerificationCode.issue_for(user)
    VerificationCode.objects.filter(pk=record.pk).update(expires_at=timezone.now() - timedelta(minutes=1))

    assert purge_expired_verification_codes.delay().get() == 1
