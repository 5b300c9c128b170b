# fs_core/common/money.py
"""
Decimal helpers shared by pricing and billing, plus the display formatting
used by clients ("1 250,00 kr"). Everything here is pure.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from rest_framework.exceptions import ValidationError

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")

THOUSANDS_SEP = "\u00a0"
DECIMAL_SEP = ","


def to_decimal(value, field_name: str) -> Decimal:
    """
    Accepts Decimal / str / int / float and converts to Decimal safely.
    Raises ValidationError for invalid values.
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            raise ValidationError({field_name: "Invalid decimal value."})
    if not result.is_finite():
        raise ValidationError({field_name: "Invalid decimal value."})
    return result


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def price_with_vat(price, vat_rate) -> Decimal:
    price = to_decimal(price, "price")
    vat_rate = to_decimal(vat_rate, "vat_rate")
    return quantize_money(price * (Decimal("1") + vat_rate / HUNDRED))


def format_price(value, *, decimals: int = 2, suffix: str = "kr") -> str:
    """
    Swedish display format: non-breaking space between thousands, comma
    before decimals, currency suffix.

        >>> format_price(Decimal("1250"))
        '1 250,00 kr'  (the separator is U+00A0)
    """
    amount = to_decimal(value, "price")
    amount = amount.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)

    sign = "-" if amount < 0 else ""
    whole, _, frac = f"{abs(amount):f}".partition(".")

    groups = []
    while len(whole) > 3:
        groups.insert(0, whole[-3:])
        whole = whole[:-3]
    groups.insert(0, whole)

    text = sign + THOUSANDS_SEP.join(groups)
    if decimals > 0:
        text += DECIMAL_SEP + frac
    return f"{text} {suffix}" if suffix else text


def parse_price(text: str, *, suffix: str = "kr") -> Decimal:
    """
    Inverse of format_price: parse_price(format_price(x)) == x for any x with
    at most `decimals` fraction digits.
    """
    if not isinstance(text, str):
        raise ValueError("Price text must be a string.")

    raw = text.strip()
    if suffix and raw.endswith(suffix):
        raw = raw[: -len(suffix)]

    raw = raw.replace(THOUSANDS_SEP, "").replace(" ", "").replace("−", "-")
    raw = raw.replace(DECIMAL_SEP, ".")

    try:
        return Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"Not a price: {text!r}")
