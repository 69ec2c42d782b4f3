"""Admin registrations for the identity store."""

from __future__ import annotations

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from .models import Host, User, VerificationCode


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("email", "full_name", "mobile_number", "role", "is_verified", "created_at")
    list_filter = ("role", "is_verified")
    search_fields = ("email", "full_name", "mobile_number")
    readonly_fields = ("password", "last_login", "created_at", "updated_at")


@admin.register(Host)
class HostAdmin(admin.ModelAdmin):
    list_display = ("business_name", "host_type", "city", "email", "is_verified", "rating")
    list_filter = ("host_type", "venue_type", "is_verified", "city")
    search_fields = ("business_name", "owner_name", "email", "mobile_number", "city")
    filter_horizontal = ("services",)
    readonly_fields = ("password", "last_login", "created_at", "updated_at")
    fieldsets = (
        (None, {"fields": ("email", "mobile_number", "password", "host_type")}),
        (_("Business"), {"fields": ("business_name", "owner_name", "address", "city", "zip_code", "services")}),
        (_("Venue"), {"fields": ("venue_type", "max_guest_capacity")}),
        (_("Catering and organizing"), {"fields": ("vegetarian_menu", "non_vegetarian_menu", "event_types")}),
        (
            _("Pricing and payouts"),
            {
                "fields": (
                    "base_price",
                    "price_per_hour",
                    "price_per_day",
                    "cleaning_fee",
                    "security_deposit",
                    "advance_percentage",
                    "accepts_bank_transfer",
                    "accepts_upi",
                    "accepts_online_payment",
                    "bank_account_number",
                    "bank_ifsc_code",
                    "bank_account_holder",
                    "bank_name",
                    "upi_id",
                )
            },
        ),
        (_("Verification"), {"fields": ("email_verified", "mobile_verified", "is_verified", "rating")}),
        (_("Dates"), {"fields": ("last_login", "created_at", "updated_at")}),
    )


@admin.register(VerificationCode)
class VerificationCodeAdmin(admin.ModelAdmin):
    list_display = ("email", "principal_kind", "principal_id", "email_verified", "mobile_verified", "expires_at")
    list_filter = ("principal_kind",)
    search_fields = ("email",)
