"""Serializers for the listing directory and host catalogue entries."""

from __future__ import annotations

from typing import Any

from rest_framework import serializers  # type: ignore

from apps.users.models import Host
from apps.users.serializers import HostSerializer

from .models import AvailabilityDay, DecorationCategory, HostMedia, HostReview, MenuItem, OrganizerService


class MenuItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = MenuItem
        fields = ["id", "category", "name", "description", "price", "is_vegetarian"]


class DecorationCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = DecorationCategory
        fields = ["id", "name", "description", "price_per_sq_ft", "package_price"]

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs.get("price_per_sq_ft") is None and attrs.get("package_price") is None:
            raise serializers.ValidationError(
                {"price_per_sq_ft": "Either price per sq ft or package price is required."}
            )
        return attrs


class OrganizerServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrganizerService
        fields = ["id", "name", "description", "price_per_guest"]


class TimeSlotSerializer(serializers.Serializer):
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()
    is_booked = serializers.BooleanField(default=False)

    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        if attrs["end_time"] <= attrs["start_time"]:
            raise serializers.ValidationError({"end_time": "End time must be after start time."})
        return attrs


class AvailabilityDaySerializer(serializers.ModelSerializer):
    time_slots = TimeSlotSerializer(many=True, required=False)

    class Meta:
        model = AvailabilityDay
        fields = ["date", "is_available", "time_slots"]

    def to_internal_value(self, data):  # type: ignore
        value = super().to_internal_value(data)
        # store times as strings in the JSON column
        value["time_slots"] = [
            {
                "start_time": slot["start_time"].isoformat(timespec="minutes"),
                "end_time": slot["end_time"].isoformat(timespec="minutes"),
                "is_booked": slot["is_booked"],
            }
            for slot in value.get("time_slots", [])
        ]
        return value


class AvailabilityCalendarSerializer(serializers.ListSerializer):
    child = AvailabilityDaySerializer()

    def validate(self, attrs):  # type: ignore
        dates = [day["date"] for day in attrs]
        if len(dates) != len(set(dates)):
            raise serializers.ValidationError("Each date may appear only once.")
        return attrs


class HostMediaSerializer(serializers.ModelSerializer):
    path = serializers.SerializerMethodField()

    class Meta:
        model = HostMedia
        fields = ["id", "kind", "path", "original_name", "size", "uploaded_at"]

    def get_path(self, obj: HostMedia) -> str:
        return obj.file.url


class HostReviewSerializer(serializers.ModelSerializer):
    user = serializers.CharField(source="user.full_name", read_only=True)

    class Meta:
        model = HostReview
        fields = ["id", "user", "rating", "comment", "created_at"]


class HostListingSerializer(HostSerializer):
    """Host profile plus public media, calendar and reviews."""

    images = serializers.SerializerMethodField()
    videos = serializers.SerializerMethodField()
    availability = AvailabilityDaySerializer(many=True, read_only=True)
    reviews = HostReviewSerializer(many=True, read_only=True)

    class Meta(HostSerializer.Meta):
        fields = HostSerializer.Meta.fields + ["images", "videos", "availability", "reviews"]

    def _media_paths(self, obj: Host, kind: str) -> list[str]:
        # iterate the prefetched relation instead of filtering in SQL
        return [media.file.url for media in obj.media.all() if media.kind == kind]

    def get_images(self, obj: Host) -> list[str]:
        return self._media_paths(obj, HostMedia.Kind.IMAGE)

    def get_videos(self, obj: Host) -> list[str]:
        return self._media_paths(obj, HostMedia.Kind.VIDEO)


class VenueSerializer(HostListingSerializer):
    def validate(self, attrs: dict[str, Any]) -> dict[str, Any]:  # type: ignore
        venue_type = attrs.get("venue_type", getattr(self.instance, "venue_type", ""))
        capacity = attrs.get("max_guest_capacity", getattr(self.instance, "max_guest_capacity", None))
        errors = {}
        if not venue_type:
            errors["venue_type"] = "Venue type is required for venues."
        if not capacity:
            errors["max_guest_capacity"] = "Maximum guest capacity is required for venues."
        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class ServiceProviderSerializer(HostListingSerializer):
    menu_items = MenuItemSerializer(many=True, read_only=True)
    decoration_categories = DecorationCategorySerializer(many=True, read_only=True)
    organizer_services = OrganizerServiceSerializer(many=True, read_only=True)

    class Meta(HostListingSerializer.Meta):
        fields = HostListingSerializer.Meta.fields + [
            "menu_items",
            "decoration_categories",
            "organizer_services",
        ]
