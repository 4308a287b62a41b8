"""Role based permissions shared by every AutoRent API."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore


def _has_role(user, helper: str) -> bool:
    if not user or not user.is_authenticated:
        return False
    check = getattr(user, helper, None)
    return bool(check and check())


class IsAdmin(permissions.BasePermission):
    """Only administrators."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _has_role(request.user, "is_admin")


class IsAdminOrManager(permissions.BasePermission):
    """Administrators and managers: fleet writes, analytics, reports, uploads."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _has_role(request.user, "is_admin_or_manager")


class IsStaffMember(permissions.BasePermission):
    """Any office role: admin, manager or employee."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        return _has_role(request.user, "is_staff_member")


class IsAdminOrManagerOrReadOnly(permissions.BasePermission):
    """
    Anyone may read, admins and managers may write.
    """

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        return _has_role(request.user, "is_admin_or_manager")
