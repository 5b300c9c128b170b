# fs_core/case_billing/apps.py
from __future__ import annotations

from django.apps import AppConfig


class CaseBillingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fs_core.case_billing"
    label = "case_billing"
