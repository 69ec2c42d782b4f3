"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking, BookingService


class BookingServiceInline(admin.TabularInline):
    model = BookingService
    extra = 0
    raw_id_fields = ("service_provider",)


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "user",
        "venue",
        "event_type",
        "status",
        "start_date",
        "end_date",
        "guest_count",
        "created_at",
    )
    list_filter = ("status", "event_type", "is_service_only", "start_date")
    search_fields = ("customer_name", "user__email", "venue__business_name")
    raw_id_fields = ("user", "venue")
    readonly_fields = ("created_at", "updated_at", "email_sent", "sms_sent", "call_made")
    inlines = [BookingServiceInline]
