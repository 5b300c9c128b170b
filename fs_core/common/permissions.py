# fs_core/common/permissions.py
from __future__ import annotations

from typing import Set

from django.conf import settings
from rest_framework.permissions import SAFE_METHODS, BasePermission

ROLE_TECHNICIAN = "TECHNICIAN"
ROLE_READONLY = "READONLY"


def admin_group_name() -> str:
    return getattr(settings, "CASE_BILLING_ADMIN_GROUP", "ADMIN")


def user_roles(user) -> Set[str]:
    """
    Resolve roles from Django groups. Superusers are always admins.
    Authenticated users without groups are READONLY.
    """
    roles: Set[str] = set()

    if not user or not getattr(user, "is_authenticated", False):
        return roles

    if getattr(user, "is_superuser", False):
        roles.add(admin_group_name())
        return roles

    if hasattr(user, "groups"):
        roles.update(user.groups.values_list("name", flat=True))

    if not roles:
        roles.add(ROLE_READONLY)

    return roles


def is_admin(user) -> bool:
    return admin_group_name() in user_roles(user)


class IsBillingAdmin(BasePermission):
    """
    Admin-only actions (discount approval, approval queue).
    """
    message = "Only administrators can perform this action."

    def has_permission(self, request, view) -> bool:
        return is_admin(request.user)


class AdminWriteOrAuthenticatedRead(BasePermission):
    """
    Reference data (articles, price lists): everyone authenticated reads,
    only admins write.
    """
    message = "Only administrators can modify this resource."

    def has_permission(self, request, view) -> bool:
        user = request.user
        if not user or not getattr(user, "is_authenticated", False):
            return False
        if request.method in SAFE_METHODS:
            return True
        return is_admin(user)
