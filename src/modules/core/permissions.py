"""DRF permission classes shared across modules."""

from __future__ import annotations

from rest_framework.permissions import BasePermission


def is_privileged(user) -> bool:
    """Return ``True`` for administrators (role ``ADMIN`` or superuser)."""
    if not user or not user.is_authenticated:
        return False
    return bool(getattr(user, "is_privileged", False) or user.is_superuser)


class IsPrivileged(BasePermission):
    """Allow access only to administrators."""

    message = "Administrator privileges required."

    def has_permission(self, request, view) -> bool:
        return is_privileged(request.user)
