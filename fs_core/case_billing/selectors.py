# fs_core/case_billing/selectors.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable
from uuid import UUID

from django.db.models import QuerySet

from fs_core.case_billing.calculations import vat_amount
from fs_core.case_billing.models import CaseBillingItem, CaseBillingItemStatus
from fs_core.common.api.exceptions import NotFoundError
from fs_core.common.money import ZERO, quantize_money


@dataclass(frozen=True)
class CaseBillingSummary:
    item_count: int
    subtotal: Decimal
    total_discount: Decimal
    vat_amount: Decimal
    total_amount: Decimal
    requires_approval: bool


def case_items(*, case_id: UUID, case_type: str) -> QuerySet[CaseBillingItem]:
    return (
        CaseBillingItem.objects.filter(case_id=case_id, case_type=case_type)
        .select_related("article")
        .order_by("created_at")
    )


def get_item(*, item_id: UUID) -> CaseBillingItem:
    item = CaseBillingItem.objects.select_related("article").filter(id=item_id).first()
    if item is None:
        raise NotFoundError(f"Billing line {item_id} not found.")
    return item


def case_has_billing_items(*, case_id: UUID, case_type: str) -> bool:
    return CaseBillingItem.objects.filter(case_id=case_id, case_type=case_type).exists()


def items_requiring_approval() -> QuerySet[CaseBillingItem]:
    """Admin review queue across all jobs, newest first."""
    return (
        CaseBillingItem.objects.filter(requires_approval=True, status=CaseBillingItemStatus.PENDING)
        .select_related("article")
        .order_by("-created_at")
    )


def summarize_items(items: Iterable[CaseBillingItem]) -> CaseBillingSummary:
    """
    Pure sums over the stored lines; rounding happens once at the end so
    the result does not depend on line order.
    """
    count = 0
    subtotal = ZERO
    total_discount = ZERO
    vat = ZERO
    requires_approval = False

    for item in items:
        count += 1
        subtotal += item.total_price
        total_discount += item.unit_price * item.quantity - item.total_price
        vat += vat_amount(item.total_price, item.vat_rate)
        requires_approval = requires_approval or item.requires_approval

    subtotal = quantize_money(subtotal)
    vat = quantize_money(vat)
    return CaseBillingSummary(
        item_count=count,
        subtotal=subtotal,
        total_discount=quantize_money(total_discount),
        vat_amount=vat,
        total_amount=subtotal + vat,
        requires_approval=requires_approval,
    )


def summarize(*, case_id: UUID, case_type: str) -> CaseBillingSummary:
    return summarize_items(case_items(case_id=case_id, case_type=case_type))
