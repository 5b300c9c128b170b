# fs_core/catalog/api/serializers.py
from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from fs_core.catalog.models import DEFAULT_CATEGORY, Article, ArticleUnit


class ArticleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Article
        fields = [
            "id",
            "code",
            "name",
            "description",
            "unit",
            "default_price",
            "vat_rate",
            "category",
            "sort_order",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ArticleCreateSerializer(serializers.Serializer):
    """
    Range checks (price >= 0, VAT 0-100) live in ArticleService so every
    caller gets them; only shapes are checked here.
    """
    code = serializers.CharField(max_length=32)
    name = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    unit = serializers.ChoiceField(choices=ArticleUnit.choices, default=ArticleUnit.PIECE)
    default_price = serializers.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    vat_rate = serializers.DecimalField(max_digits=5, decimal_places=2, default=Decimal("25.00"))
    category = serializers.CharField(max_length=64, required=False, default=DEFAULT_CATEGORY)
    sort_order = serializers.IntegerField(required=False, default=0)
    is_active = serializers.BooleanField(required=False, default=True)


class ArticleUpdateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=32, required=False)
    name = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    unit = serializers.ChoiceField(choices=ArticleUnit.choices, required=False)
    default_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    vat_rate = serializers.DecimalField(max_digits=5, decimal_places=2, required=False)
    category = serializers.CharField(max_length=64, required=False, allow_blank=True)
    sort_order = serializers.IntegerField(required=False)
    is_active = serializers.BooleanField(required=False)
