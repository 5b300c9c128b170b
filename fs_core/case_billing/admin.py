# fs_core/case_billing/admin.py
from __future__ import annotations

from django.contrib import admin

from fs_core.case_billing.models import CaseBillingItem


@admin.register(CaseBillingItem)
class CaseBillingItemAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "case_type",
        "case_id",
        "article_code",
        "quantity",
        "unit_price",
        "discount_percent",
        "total_price",
        "status",
        "requires_approval",
        "created_at",
    )
    list_filter = ("case_type", "status", "requires_approval", "price_source")
    search_fields = ("id", "case_id", "article_code", "article_name")
    # snapshot fields are only written through the billing services
    readonly_fields = ("unit_price", "discounted_price", "total_price", "price_source")
    ordering = ("-created_at",)
