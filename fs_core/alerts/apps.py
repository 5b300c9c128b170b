# fs_core/alerts/apps.py
from __future__ import annotations

from django.apps import AppConfig


class AlertsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fs_core.alerts"
    label = "alerts"

    def ready(self) -> None:
        # registers event subscribers
        from fs_core.alerts import subscribers  # noqa: F401
