"""Permission classes for housing endpoints."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class CanBookRooms(permissions.BasePermission):
    """Any authenticated user may read; only students may create bookings.

    Status changes are authorised by the booking ledger itself, which
    knows the booking's owner and current status.
    """

    message = "Only students can book rooms."

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if getattr(view, "action", None) == "create":
            return hasattr(user, "is_student") and user.is_student()
        return True
