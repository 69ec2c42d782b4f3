"""Profile and administration endpoints for user accounts."""

from __future__ import annotations

from rest_framework import generics  # type: ignore
from rest_framework.permissions import IsAuthenticated  # type: ignore
from rest_framework.views import APIView  # type: ignore

from shared.responses import success_response

from .models import User
from .permissions import IsAdminPrincipal, IsUserPrincipal
from .serializers import UserProfileUpdateSerializer, UserSerializer


class UserProfileView(APIView):
    """GET/PUT the authenticated user's own profile."""

    permission_classes = [IsAuthenticated, IsUserPrincipal]

    def get(self, request):  # type: ignore
        return success_response(UserSerializer(request.user).data)

    def put(self, request):  # type: ignore
        serializer = UserProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return success_response(UserSerializer(user).data)


class UserListView(generics.ListAPIView):
    """Administrators list every user account."""

    permission_classes = [IsAuthenticated, IsAdminPrincipal]
    serializer_class = UserSerializer
    queryset = User.objects.order_by("-created_at")
