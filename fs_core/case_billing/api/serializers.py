# fs_core/case_billing/api/serializers.py
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from fs_core.case_billing.models import BillableCaseType, CaseBillingItem, CaseBillingItemStatus


class CaseBillingItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = CaseBillingItem
        fields = [
            "id",
            "case_id",
            "case_type",
            "customer_id",
            "article",
            "article_code",
            "article_name",
            "quantity",
            "unit_price",
            "discount_percent",
            "discounted_price",
            "total_price",
            "vat_rate",
            "price_source",
            "status",
            "requires_approval",
            "added_by_technician_id",
            "added_by_technician_name",
            "approved_by_user_id",
            "approved_at",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CaseBillingItemCreateSerializer(serializers.Serializer):
    case_id = serializers.UUIDField()
    case_type = serializers.ChoiceField(choices=BillableCaseType.choices)
    article = serializers.UUIDField()
    customer = serializers.UUIDField(required=False, allow_null=True, default=None)
    quantity = serializers.IntegerField(required=False, default=1)
    discount_percent = serializers.DecimalField(max_digits=6, decimal_places=2, required=False, default=Decimal("0.00"))
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class CaseBillingItemUpdateSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(required=False)
    discount_percent = serializers.DecimalField(max_digits=6, decimal_places=2, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class CaseBillingItemStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=CaseBillingItemStatus.choices)


class CaseStatusSerializer(serializers.Serializer):
    case_id = serializers.UUIDField()
    case_type = serializers.ChoiceField(choices=BillableCaseType.choices)
    status = serializers.ChoiceField(choices=CaseBillingItemStatus.choices)


class CaseBillingSummarySerializer(serializers.Serializer):
    item_count = serializers.IntegerField(read_only=True)
    subtotal = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    total_discount = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    vat_amount = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    total_amount = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    requires_approval = serializers.BooleanField(read_only=True)
