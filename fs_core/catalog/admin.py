# fs_core/catalog/admin.py
from __future__ import annotations

from django.contrib import admin

from fs_core.catalog.models import Article


@admin.register(Article)
class ArticleAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "category", "unit", "default_price", "vat_rate", "is_active")
    list_filter = ("category", "unit", "is_active")
    search_fields = ("code", "name", "category")
    ordering = ("category", "sort_order", "name")
