# fs_core/alerts/selectors.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models import Q, QuerySet

from fs_core.alerts.models import Notification, NotificationChannel
from fs_core.common.permissions import admin_group_name


def notifications_qs(*, user_id: int) -> QuerySet[Notification]:
    return Notification.objects.filter(recipient_id=user_id, channel=NotificationChannel.IN_APP)


def admin_user_ids() -> list[int]:
    """Active admins: members of the admin group, plus superusers."""
    User = get_user_model()
    return list(
        User.objects.filter(is_active=True)
        .filter(Q(groups__name=admin_group_name()) | Q(is_superuser=True))
        .order_by("id")
        .values_list("id", flat=True)
        .distinct()
    )
