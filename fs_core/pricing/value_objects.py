# fs_core/pricing/value_objects.py
"""Value objects returned by price resolution."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from uuid import UUID

from django.db import models

from fs_core.catalog.models import Article


class PriceTier(models.IntegerChoices):
    CUSTOMER_LIST = 1, "Customer price list"
    DEFAULT_LIST = 2, "Default price list"
    ARTICLE_DEFAULT = 3, "Article default price"


@dataclass(frozen=True)
class ResolvedPrice:
    """
    Effective unit price plus where it came from.

    `source` is what billing lines store; `tier` and `price_list_id` are
    kept for explanations and tests.
    """
    price: Decimal
    source: str
    tier: int
    price_list_id: UUID | None = None

    def explain(self) -> str:
        return f"{self.price} ({PriceTier(self.tier).label})"


@dataclass(frozen=True)
class ArticleWithPrice:
    article: Article
    effective_price: Decimal
    price_source: str


@dataclass
class CategoryGroup:
    category: str
    articles: list[ArticleWithPrice] = field(default_factory=list)
