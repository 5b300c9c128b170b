# fs_core/alerts/models.py
from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from fs_core.common.models import UUIDModel


class NotificationChannel(models.TextChoices):
    IN_APP = "IN_APP", "In App"
    EMAIL = "EMAIL", "Email"


class NotificationKind(models.TextChoices):
    DISCOUNT_REQUEST = "discount-request", "Discount approval request"
    GENERAL = "general", "General"


class Notification(UUIDModel):
    """
    Delivery record per user. Only IN_APP is produced here; other channels
    are delivered by an external transport reading these rows.
    """
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )

    channel = models.CharField(
        max_length=16,
        choices=NotificationChannel.choices,
        default=NotificationChannel.IN_APP,
        db_index=True,
    )
    kind = models.CharField(
        max_length=32,
        choices=NotificationKind.choices,
        default=NotificationKind.GENERAL,
        db_index=True,
    )

    title = models.CharField(max_length=255)
    body = models.TextField(blank=True, default="")

    is_read = models.BooleanField(default=False, db_index=True)
    read_at = models.DateTimeField(null=True, blank=True)

    meta = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "alerts_notification"
        indexes = [
            models.Index(fields=["recipient", "is_read", "created_at"], name="alerts_notif_recipient_idx"),
        ]

    def mark_read(self) -> None:
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
