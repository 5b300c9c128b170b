# fs_core/pricing/models.py
from __future__ import annotations

from decimal import Decimal

from django.db import models
from django.db.models import Q

from fs_core.catalog.models import Article
from fs_core.common.models import UUIDModel


class PriceSource(models.TextChoices):
    STANDARD = "standard", "Standard price"
    CUSTOMER_LIST = "customer_list", "Customer price list"


class PriceList(UUIDModel):
    """
    Named set of per-article prices. Exactly one list may be the default
    (tier-2 fallback); customers can be assigned any list (tier 1).
    """
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")

    is_default = models.BooleanField(default=False, db_index=True)
    is_active = models.BooleanField(default=True, db_index=True)

    valid_from = models.DateField(null=True, blank=True)
    valid_to = models.DateField(null=True, blank=True)

    class Meta:
        db_table = "pricing_price_list"
        ordering = ["-is_default", "name"]
        constraints = [
            models.UniqueConstraint(
                fields=["is_default"],
                condition=Q(is_default=True),
                name="uq_price_list_single_default",
            )
        ]

    def __str__(self) -> str:
        return self.name


class PriceListItem(UUIDModel):
    """
    Custom price for one article in one list.

    discount_percent is informational: whoever writes custom_price has
    already folded it in, resolution never applies it again.
    """
    price_list = models.ForeignKey(PriceList, on_delete=models.CASCADE, related_name="items")
    article = models.ForeignKey(Article, on_delete=models.PROTECT, related_name="price_list_items")

    custom_price = models.DecimalField(max_digits=12, decimal_places=2)
    discount_percent = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        db_table = "pricing_price_list_item"
        constraints = [
            models.UniqueConstraint(
                fields=["price_list", "article"],
                name="uq_price_list_item_list_article",
            )
        ]

    def __str__(self) -> str:
        return f"{self.price_list_id}:{self.article_id}={self.custom_price}"
