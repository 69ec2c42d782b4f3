"""FilterSet for booking listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    # bookings starting on or after / ending on or before the given day
    start_date = django_filters.DateFilter(field_name="start_date", lookup_expr="date__gte")
    end_date = django_filters.DateFilter(field_name="end_date", lookup_expr="date__lte")
    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)

    class Meta:
        model = Booking
        fields = ["start_date", "end_date", "status"]
