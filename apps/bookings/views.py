"""API views for the booking domain."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore

from apps.users.permissions import IsAdminPrincipal, IsUserPrincipal
from shared.responses import success_response

from . import services
from .filters import BookingFilterSet
from .serializers import BookingCreateSerializer, BookingSerializer, BookingStatusSerializer


class BookingViewSet(viewsets.GenericViewSet):
    """Create, list, inspect and move bookings through their lifecycle."""

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = BookingFilterSet

    def get_permissions(self):  # type: ignore
        if self.action == "create":
            return [permissions.IsAuthenticated(), IsUserPrincipal()]
        if self.action == "destroy":
            return [permissions.IsAuthenticated(), IsAdminPrincipal()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        if self.action == "update_status":
            return BookingStatusSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        return services.bookings_visible_to(self.request.user)

    def list(self, request):  # type: ignore
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = BookingSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def create(self, request):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = serializer.save()
        return success_response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):  # type: ignore
        booking = services.get_booking_for(request.user, pk)
        return success_response(BookingSerializer(booking).data)

    def destroy(self, request, pk=None):  # type: ignore
        services.delete_booking(pk)
        return success_response({})

    @action(detail=True, methods=["put"], url_path="status")
    def update_status(self, request, pk=None):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = services.change_status(pk, request.user, serializer.validated_data["status"])
        return success_response(BookingSerializer(booking).data)
