# fs_core/pricing/resolution.py
"""
Price resolution.

Effective unit price = first match of an ordered chain of tiers:

1. the customer's assigned price list has the article -> customer_list
2. the default price list has the article             -> standard
3. the article's own default_price                    -> standard

Tiers never merge: a customer entry wins even when the default list is
cheaper. The single-article and catalog variants run the same chain; they
only differ in how price list entries are looked up.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable, Optional, Protocol
from uuid import UUID

from fs_core.catalog.models import Article
from fs_core.catalog.selectors import active_articles, get_article
from fs_core.customers.selectors import assigned_price_list_id
from fs_core.pricing.models import PriceListItem, PriceSource
from fs_core.pricing.selectors import default_price_list_id
from fs_core.pricing.value_objects import ArticleWithPrice, CategoryGroup, PriceTier, ResolvedPrice


@dataclass(frozen=True)
class PricingContext:
    """The two candidate lists for one customer, looked up once."""
    customer_price_list_id: UUID | None
    default_price_list_id: UUID | None


class PriceLookup(Protocol):
    def custom_price(self, price_list_id: UUID, article_id: UUID) -> Decimal | None: ...


class QueryLookup:
    """One query per probe. Used for single-article resolution."""

    def custom_price(self, price_list_id: UUID, article_id: UUID) -> Decimal | None:
        return (
            PriceListItem.objects.filter(price_list_id=price_list_id, article_id=article_id)
            .values_list("custom_price", flat=True)
            .first()
        )


class PreloadedLookup:
    """All entries of the candidate lists, loaded with a single query."""

    def __init__(self, price_list_ids: Iterable[UUID | None]):
        ids = {pid for pid in price_list_ids if pid}
        self._prices: dict[tuple[UUID, UUID], Decimal] = {}
        if ids:
            rows = PriceListItem.objects.filter(price_list_id__in=ids).values_list(
                "price_list_id", "article_id", "custom_price"
            )
            self._prices = {(pl_id, a_id): price for pl_id, a_id, price in rows}

    def custom_price(self, price_list_id: UUID, article_id: UUID) -> Decimal | None:
        return self._prices.get((price_list_id, article_id))


Resolver = Callable[[Article, PricingContext, PriceLookup], Optional[ResolvedPrice]]


def customer_list_tier(article: Article, ctx: PricingContext, lookup: PriceLookup) -> ResolvedPrice | None:
    if ctx.customer_price_list_id is None:
        return None
    price = lookup.custom_price(ctx.customer_price_list_id, article.id)
    if price is None:
        return None
    return ResolvedPrice(
        price=price,
        source=PriceSource.CUSTOMER_LIST,
        tier=PriceTier.CUSTOMER_LIST,
        price_list_id=ctx.customer_price_list_id,
    )


def default_list_tier(article: Article, ctx: PricingContext, lookup: PriceLookup) -> ResolvedPrice | None:
    if ctx.default_price_list_id is None:
        return None
    price = lookup.custom_price(ctx.default_price_list_id, article.id)
    if price is None:
        return None
    return ResolvedPrice(
        price=price,
        source=PriceSource.STANDARD,
        tier=PriceTier.DEFAULT_LIST,
        price_list_id=ctx.default_price_list_id,
    )


def article_default_tier(article: Article, ctx: PricingContext, lookup: PriceLookup) -> ResolvedPrice | None:
    return ResolvedPrice(
        price=article.default_price,
        source=PriceSource.STANDARD,
        tier=PriceTier.ARTICLE_DEFAULT,
    )


# Order matters. The last tier always matches.
RESOLVERS: tuple[Resolver, ...] = (
    customer_list_tier,
    default_list_tier,
    article_default_tier,
)


def run_chain(article: Article, ctx: PricingContext, lookup: PriceLookup) -> ResolvedPrice:
    for resolver in RESOLVERS:
        match = resolver(article, ctx, lookup)
        if match is not None:
            return match
    raise LookupError(f"No pricing tier matched article {article.code}")


def pricing_context(*, customer_id: UUID | None = None) -> PricingContext:
    # No default list (e.g. mid-promotion) simply skips tier 2.
    return PricingContext(
        customer_price_list_id=assigned_price_list_id(customer_id=customer_id),
        default_price_list_id=default_price_list_id(),
    )


def resolve_price(article: Article, customer_id: UUID | None = None) -> ResolvedPrice:
    """
    Effective price for one article. Works for inactive articles too.
    """
    ctx = pricing_context(customer_id=customer_id)
    return run_chain(article, ctx, QueryLookup())


def resolve_price_for_article_id(article_id: UUID, customer_id: UUID | None = None) -> tuple[Article, ResolvedPrice]:
    article = get_article(article_id=article_id)
    return article, resolve_price(article, customer_id=customer_id)


def resolve_prices_for_catalog(customer_id: UUID | None = None) -> list[ArticleWithPrice]:
    """
    Every active article with its effective price, ordered by category,
    sort order and name. Same answers as resolve_price() per article.
    """
    ctx = pricing_context(customer_id=customer_id)
    lookup = PreloadedLookup([ctx.customer_price_list_id, ctx.default_price_list_id])

    result = []
    for article in active_articles():
        resolved = run_chain(article, ctx, lookup)
        result.append(
            ArticleWithPrice(
                article=article,
                effective_price=resolved.price,
                price_source=resolved.source,
            )
        )
    return result


def articles_by_category(customer_id: UUID | None = None) -> list[CategoryGroup]:
    groups: dict[str, CategoryGroup] = {}
    for entry in resolve_prices_for_catalog(customer_id=customer_id):
        category = entry.article.category
        if category not in groups:
            groups[category] = CategoryGroup(category=category)
        groups[category].articles.append(entry)
    return list(groups.values())


def format_price_source(source: str) -> str:
    try:
        return PriceSource(source).label
    except ValueError:
        return source
