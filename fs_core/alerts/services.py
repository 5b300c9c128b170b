# fs_core/alerts/services.py
from __future__ import annotations

from typing import Iterable
from uuid import UUID

from django.db import transaction

from fs_core.alerts.models import Notification, NotificationChannel, NotificationKind
from fs_core.common.api.exceptions import NotFoundError


class NotificationService:
    @staticmethod
    @transaction.atomic
    def notify_users_in_app(
        *,
        user_ids: Iterable[int],
        title: str,
        body: str = "",
        kind: str = NotificationKind.GENERAL,
        meta: dict | None = None,
    ) -> list[Notification]:
        objs = [
            Notification(
                recipient_id=uid,
                channel=NotificationChannel.IN_APP,
                kind=kind,
                title=title[:255],
                body=body,
                meta=meta or {},
            )
            for uid in user_ids
        ]
        return Notification.objects.bulk_create(objs)

    @staticmethod
    def mark_read(*, notification_id: UUID, user_id: int) -> Notification:
        notif = Notification.objects.filter(id=notification_id, recipient_id=user_id).first()
        if notif is None:
            raise NotFoundError("Notification not found.")
        notif.mark_read()
        notif.save(update_fields=["is_read", "read_at", "updated_at"])
        return notif
