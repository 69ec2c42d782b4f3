"""Permission classes keyed on the principal kind carried by the token."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def _principal_kind(request) -> str | None:
    user = request.user
    if not user or not user.is_authenticated:
        return None
    return getattr(user, "kind", None)


class IsUserPrincipal(permissions.BasePermission):
    """Only customer accounts (users, including administrators)."""

    message = "Only users can perform this action."

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _principal_kind(request) == "user"


class IsHostPrincipal(permissions.BasePermission):
    """Only host accounts."""

    message = "Only hosts can perform this action."

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _principal_kind(request) == "host"


class IsAdminPrincipal(permissions.BasePermission):
    message = "Only administrators can perform this action."

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _principal_kind(request) == "user" and request.user.is_admin


class IsHostOwnerOrAdmin(permissions.BasePermission):
    """Object-level permission: the host record itself, or an administrator user."""

    message = "Not authorized to modify this listing."

    def has_object_permission(self, request, view, obj) -> bool:  # type: ignore
        kind = _principal_kind(request)
        if kind == "host":
            return request.user.pk == obj.pk
        return kind == "user" and request.user.is_admin and getattr(view, "action", None) == "destroy"
