# fs_core/pricing/api/serializers.py
from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from fs_core.catalog.api.serializers import ArticleSerializer
from fs_core.common.money import format_price, price_with_vat
from fs_core.pricing.models import PriceList, PriceListItem
from fs_core.pricing.resolution import format_price_source
from fs_core.pricing.selectors import item_count


class PriceListSerializer(serializers.ModelSerializer):
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = PriceList
        fields = [
            "id",
            "name",
            "description",
            "is_default",
            "is_active",
            "valid_from",
            "valid_to",
            "item_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_item_count(self, obj: PriceList) -> int:
        annotated = getattr(obj, "item_count", None)
        if annotated is not None:
            return annotated
        return item_count(price_list_id=obj.id)


class PriceListCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    is_default = serializers.BooleanField(required=False, default=False)
    is_active = serializers.BooleanField(required=False, default=True)
    valid_from = serializers.DateField(required=False, allow_null=True, default=None)
    valid_to = serializers.DateField(required=False, allow_null=True, default=None)


class PriceListUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    is_default = serializers.BooleanField(required=False)
    is_active = serializers.BooleanField(required=False)
    valid_from = serializers.DateField(required=False, allow_null=True)
    valid_to = serializers.DateField(required=False, allow_null=True)


class PriceListCopySerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)


class PriceListItemSerializer(serializers.ModelSerializer):
    article = ArticleSerializer(read_only=True)

    class Meta:
        model = PriceListItem
        fields = [
            "id",
            "price_list",
            "article",
            "custom_price",
            "discount_percent",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class PriceListItemUpsertSerializer(serializers.Serializer):
    article = serializers.UUIDField()
    custom_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    discount_percent = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, default=Decimal("0.00"))


class ArticleWithPriceSerializer(serializers.Serializer):
    """Serializes pricing.value_objects.ArticleWithPrice."""
    article = ArticleSerializer(read_only=True)
    effective_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    price_source = serializers.CharField(read_only=True)
    price_source_label = serializers.SerializerMethodField()
    price_with_vat = serializers.SerializerMethodField()
    display_price = serializers.SerializerMethodField()

    def get_price_source_label(self, obj) -> str:
        return format_price_source(obj.price_source)

    def get_price_with_vat(self, obj) -> str:
        return str(price_with_vat(obj.effective_price, obj.article.vat_rate))

    def get_display_price(self, obj) -> str:
        return format_price(obj.effective_price, suffix=settings.CASE_BILLING_CURRENCY_SUFFIX)


class CategoryGroupSerializer(serializers.Serializer):
    category = serializers.CharField(read_only=True)
    articles = ArticleWithPriceSerializer(many=True, read_only=True)


class ResolvedPriceSerializer(serializers.Serializer):
    article = serializers.UUIDField(read_only=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    source = serializers.CharField(read_only=True)
    tier = serializers.IntegerField(read_only=True)
    price_list = serializers.UUIDField(read_only=True, allow_null=True)
