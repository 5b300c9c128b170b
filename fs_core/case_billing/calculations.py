# fs_core/case_billing/calculations.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from fs_core.common.money import HUNDRED, ZERO, quantize_money


@dataclass(frozen=True)
class LinePricing:
    discounted_price: Decimal
    total_price: Decimal


def discounted_price(unit_price: Decimal, discount_percent: Decimal) -> Decimal:
    return quantize_money(unit_price * (Decimal("1") - discount_percent / HUNDRED))


def line_pricing(*, unit_price: Decimal, quantity: int, discount_percent: Decimal) -> LinePricing:
    """
    Derived money fields, always computed from the authoritative inputs.

    discounted_price is unit_price * (1 - d/100) rounded to cents, and
    total_price is that rounded unit price times quantity. The total can
    differ from rounding unit_price * (1 - d/100) * quantity once by up to
    quantity * 0.005 (99.99 at 33.33% x 3 gives 199.98, not 199.99).
    """
    per_unit = discounted_price(unit_price, discount_percent)
    return LinePricing(
        discounted_price=per_unit,
        total_price=quantize_money(per_unit * quantity),
    )


def vat_amount(total_price: Decimal, vat_rate: Decimal) -> Decimal:
    """Unrounded; callers sum first and round once."""
    return total_price * vat_rate / HUNDRED


def has_discount(discount_percent: Decimal | None) -> bool:
    return (discount_percent or ZERO) > ZERO
