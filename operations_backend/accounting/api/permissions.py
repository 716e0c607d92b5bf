# accounting/api/permissions.py

from __future__ import annotations

from rest_framework.permissions import BasePermission


class HasActionPermission(BasePermission):
    """
    Require the Django model permission mapped to the current viewset action.

    Usage:
        permission_classes = [IsAuthenticated, HasActionPermission]
        required_permissions = {
            "list": "accounting.view_account",
            "create": "accounting.add_account",
        }

    Actions missing from the map are denied.
    """

    message = "You do not have permission to perform this action."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = (getattr(view, "required_permissions", None) or {}).get(
            getattr(view, "action", None)
        )
        if not required:
            return False

        return user.has_perm(required)
