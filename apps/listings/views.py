"""Listing directory API views."""

from __future__ import annotations

from django.db import transaction  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser  # type: ignore

from apps.users.models import Host
from apps.users.permissions import IsHostOwnerOrAdmin, IsHostPrincipal
from shared.responses import success_response

from .filters import ServiceProviderFilterSet, VenueFilterSet
from .models import AvailabilityDay, HostMedia
from .serializers import (
    AvailabilityCalendarSerializer,
    AvailabilityDaySerializer,
    DecorationCategorySerializer,
    HostMediaSerializer,
    MenuItemSerializer,
    OrganizerServiceSerializer,
    ServiceProviderSerializer,
    VenueSerializer,
)
from .uploads import store_uploads


class HostDirectoryViewSet(viewsets.GenericViewSet):
    """Shared read/update/upload behaviour for venue and provider listings."""

    filter_backends = [DjangoFilterBackend]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    host_types: list[str] = []

    def get_queryset(self):  # type: ignore
        return (
            Host.objects.filter(host_type__in=self.host_types)
            .prefetch_related("services", "media", "availability", "reviews__user")
            .order_by("-created_at", "-id")
        )

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve"}:
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated(), IsHostOwnerOrAdmin()]

    def list(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request, pk=None):  # type: ignore
        return success_response(self.get_serializer(self.get_object()).data)

    def update(self, request, pk=None):  # type: ignore
        host = self.get_object()
        serializer = self.get_serializer(host, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return success_response(self.get_serializer(self._reload(host)).data)

    def _reload(self, host: Host) -> Host:
        return self.get_queryset().get(pk=host.pk)

    def _upload(self, request, kind: str, field: str):
        host = self.get_object()
        files = request.FILES.getlist(field)
        stored = store_uploads(host, kind, files)
        return success_response(HostMediaSerializer(stored, many=True).data)


class VenueViewSet(HostDirectoryViewSet):
    """Venues: browse, turn a host into a venue, manage and upload media."""

    serializer_class = VenueSerializer
    filterset_class = VenueFilterSet
    host_types = [Host.HostType.VENUE]

    def get_permissions(self):  # type: ignore
        if self.action == "create":
            return [permissions.IsAuthenticated(), IsHostPrincipal()]
        return super().get_permissions()

    def create(self, request):  # type: ignore
        host = request.user
        serializer = self.get_serializer(host, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save(host_type=Host.HostType.VENUE)
        return success_response(
            self.get_serializer(self._reload(host)).data,
            status=status.HTTP_201_CREATED,
        )

    def destroy(self, request, pk=None):  # type: ignore
        host = self.get_object()
        host.delete()
        return success_response({})

    @action(detail=True, methods=["put"])
    def images(self, request, pk=None):  # type: ignore
        return self._upload(request, HostMedia.Kind.IMAGE, "images")

    @action(detail=True, methods=["put"])
    def videos(self, request, pk=None):  # type: ignore
        return self._upload(request, HostMedia.Kind.VIDEO, "videos")

    @action(detail=True, methods=["put"])
    def documents(self, request, pk=None):  # type: ignore
        return self._upload(request, HostMedia.Kind.DOCUMENT, "documents")


class ServiceProviderViewSet(HostDirectoryViewSet):
    """Caterers, decorators and organizers with their catalogue entries."""

    serializer_class = ServiceProviderSerializer
    filterset_class = ServiceProviderFilterSet
    host_types = [Host.HostType.CATERER, Host.HostType.DECORATOR, Host.HostType.ORGANIZER]

    def get_queryset(self):  # type: ignore
        return super().get_queryset().prefetch_related(
            "menu_items", "decoration_categories", "organizer_services"
        )

    def _owned_provider(self, host_type: str) -> Host:
        host = self.get_object()
        if host.host_type != host_type:
            raise serializers.ValidationError(f"This service is not a {host_type}.")
        return host

    @action(detail=True, methods=["post"])
    def menu(self, request, pk=None):  # type: ignore
        host = self._owned_provider(Host.HostType.CATERER)
        serializer = MenuItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            item = serializer.save(host=host)
            if item.is_vegetarian:
                host.vegetarian_menu = True
            else:
                host.non_vegetarian_menu = True
            host.save(update_fields=["vegetarian_menu", "non_vegetarian_menu", "updated_at"])
        return success_response(MenuItemSerializer(item).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="decoration-category")
    def decoration_category(self, request, pk=None):  # type: ignore
        host = self._owned_provider(Host.HostType.DECORATOR)
        serializer = DecorationCategorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = serializer.save(host=host)
        return success_response(DecorationCategorySerializer(category).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="organizer-service")
    def organizer_service(self, request, pk=None):  # type: ignore
        host = self._owned_provider(Host.HostType.ORGANIZER)
        serializer = OrganizerServiceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = serializer.save(host=host)
        return success_response(OrganizerServiceSerializer(service).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["put"])
    def availability(self, request, pk=None):  # type: ignore
        host = self.get_object()
        serializer = AvailabilityCalendarSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with transaction.atomic():
            AvailabilityDay.objects.filter(host=host).delete()
            AvailabilityDay.objects.bulk_create(
                AvailabilityDay(host=host, **day) for day in serializer.validated_data
            )
        calendar = AvailabilityDay.objects.filter(host=host)
        return success_response(AvailabilityDaySerializer(calendar, many=True).data)

    @action(detail=True, methods=["put"])
    def images(self, request, pk=None):  # type: ignore
        return self._upload(request, HostMedia.Kind.IMAGE, "images")
