"""FilterSet definitions for the venue and service-provider directory."""

from __future__ import annotations

import django_filters  # type: ignore

from apps.users.models import Host


SERVICE_PROVIDER_TYPES = [
    (Host.HostType.CATERER.value, Host.HostType.CATERER.label),
    (Host.HostType.DECORATOR.value, Host.HostType.DECORATOR.label),
    (Host.HostType.ORGANIZER.value, Host.HostType.ORGANIZER.label),
]


class HostDirectoryFilterSet(django_filters.FilterSet):
    """Filters shared by venue and service-provider listings."""

    city = django_filters.CharFilter(field_name="city", lookup_expr="icontains")

    # CSV of service codes, matches hosts offering any of them
    services = django_filters.CharFilter(method="filter_services")

    class Meta:
        model = Host
        fields = ["city"]

    def filter_services(self, queryset, name, value):  # type: ignore
        codes = [code for code in str(value).replace(" ", "").split(",") if code]
        if not codes:
            return queryset
        return queryset.filter(services__code__in=codes).distinct()


class VenueFilterSet(HostDirectoryFilterSet):
    venue_type = django_filters.ChoiceFilter(field_name="venue_type", choices=Host.VenueType.choices)
    min_capacity = django_filters.NumberFilter(field_name="max_guest_capacity", lookup_expr="gte")

    class Meta(HostDirectoryFilterSet.Meta):
        fields = ["city", "venue_type"]


class ServiceProviderFilterSet(HostDirectoryFilterSet):
    type = django_filters.ChoiceFilter(field_name="host_type", choices=SERVICE_PROVIDER_TYPES)

    class Meta(HostDirectoryFilterSet.Meta):
        fields = ["city", "type"]
