"""Role permission classes for the booking surfaces."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


class IsStaffMember(permissions.BasePermission):
    """
    Staff surface: staff, administrators and Django staff/superusers.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return hasattr(user, "is_staff_member") and user.is_staff_member()


class IsAgent(permissions.BasePermission):
    """Agent surface: users with the sales agent role."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return hasattr(user, "is_agent") and user.is_agent()


class IsReferringAgent(permissions.BasePermission):
    """Object-level: agents only see bookings they referred."""

    def has_object_permission(self, request, view, obj) -> bool:  # type: ignore
        return getattr(obj, "agent_id", None) == request.user.id
