# fs_core/pricing/admin.py
from __future__ import annotations

from django.contrib import admin

from fs_core.pricing.models import PriceList, PriceListItem


class PriceListItemInline(admin.TabularInline):
    model = PriceListItem
    extra = 0
    autocomplete_fields = ("article",)


@admin.register(PriceList)
class PriceListAdmin(admin.ModelAdmin):
    list_display = ("name", "is_default", "is_active", "valid_from", "valid_to", "created_at")
    list_filter = ("is_default", "is_active")
    search_fields = ("name",)
    inlines = (PriceListItemInline,)
