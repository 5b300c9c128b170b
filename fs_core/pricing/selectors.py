# fs_core/pricing/selectors.py
from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from uuid import UUID

from django.db.models import Count, QuerySet

from fs_core.common.api.exceptions import NotFoundError
from fs_core.pricing.models import PriceList, PriceListItem


def price_lists_qs(*, active_only: bool = False) -> QuerySet[PriceList]:
    qs = PriceList.objects.all()
    if active_only:
        qs = qs.filter(is_active=True)
    return qs.order_by("-is_default", "name")


def price_lists_with_counts(*, active_only: bool = False) -> QuerySet[PriceList]:
    return price_lists_qs(active_only=active_only).annotate(item_count=Count("items"))


def get_price_list(*, price_list_id: UUID) -> PriceList:
    price_list = PriceList.objects.filter(id=price_list_id).first()
    if price_list is None:
        raise NotFoundError(f"Price list {price_list_id} not found.")
    return price_list


def default_price_list() -> PriceList | None:
    return PriceList.objects.filter(is_default=True).first()


def default_price_list_id() -> UUID | None:
    return PriceList.objects.filter(is_default=True).values_list("id", flat=True).first()


def price_list_items(*, price_list_id: UUID) -> QuerySet[PriceListItem]:
    return (
        PriceListItem.objects.filter(price_list_id=price_list_id)
        .select_related("article")
        .order_by("article__category", "article__sort_order", "article__name")
    )


def item_count(*, price_list_id: UUID) -> int:
    return PriceListItem.objects.filter(price_list_id=price_list_id).count()


def price_lists_by_article() -> dict[UUID, list[tuple[PriceList, Decimal]]]:
    """
    article id -> [(price list, custom price), ...], default list first,
    then by list name. Shows where an article is priced.
    """
    result: dict[UUID, list[tuple[PriceList, Decimal]]] = defaultdict(list)
    items = PriceListItem.objects.select_related("price_list")
    for item in items:
        result[item.article_id].append((item.price_list, item.custom_price))

    for entries in result.values():
        entries.sort(key=lambda e: (not e[0].is_default, e[0].name))
    return dict(result)
