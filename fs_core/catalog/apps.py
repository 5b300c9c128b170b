# fs_core/catalog/apps.py
from __future__ import annotations

from django.apps import AppConfig


class CatalogConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fs_core.catalog"
    label = "catalog"
