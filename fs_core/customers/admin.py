# fs_core/customers/admin.py
from __future__ import annotations

from django.contrib import admin

from fs_core.customers.models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "price_list", "is_active", "created_at")
    list_filter = ("is_active", "price_list")
    search_fields = ("name",)
