# fs_core/customers/apps.py
from __future__ import annotations

from django.apps import AppConfig


class CustomersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fs_core.customers"
    label = "customers"
