# fs_core/case_billing/services.py
from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID

from django.conf import settings
from django.db import transaction
from rest_framework.exceptions import ValidationError

from fs_core.case_billing.calculations import has_discount, line_pricing
from fs_core.case_billing.models import BillableCaseType, CaseBillingItem, CaseBillingItemStatus
from fs_core.case_billing.workflow import (
    ensure_editable,
    queue_discount_notification,
    requires_approval_for,
)
from fs_core.catalog.selectors import get_article
from fs_core.common.api.exceptions import NotFoundError
from fs_core.common.money import HUNDRED, ZERO, quantize_money, to_decimal
from fs_core.pricing.models import PriceSource

logger = logging.getLogger(__name__)

_UNSET = object()


def default_vat_rate() -> Decimal:
    return Decimal(str(getattr(settings, "CASE_BILLING_DEFAULT_VAT_RATE", "25.00")))


class CaseBillingService:
    @staticmethod
    def _validate_quantity(quantity) -> int:
        if isinstance(quantity, bool):
            raise ValidationError({"quantity": "Quantity must be a whole number."})
        try:
            value = int(quantity)
        except (TypeError, ValueError):
            raise ValidationError({"quantity": "Quantity must be a whole number."})
        if value != quantity and str(value) != str(quantity).strip():
            raise ValidationError({"quantity": "Quantity must be a whole number."})
        if value < 1:
            raise ValidationError({"quantity": "Quantity must be >= 1."})
        return value

    @staticmethod
    def _validate_discount(discount_percent) -> Decimal:
        # out-of-range values are rejected, never clamped
        value = quantize_money(to_decimal(discount_percent, "discount_percent"))
        if value < ZERO or value > HUNDRED:
            raise ValidationError({"discount_percent": "Must be between 0 and 100."})
        return value

    @staticmethod
    def _validate_percent(value, field_name: str) -> Decimal:
        value = quantize_money(to_decimal(value, field_name))
        if value < ZERO or value > HUNDRED:
            raise ValidationError({field_name: "Must be between 0 and 100."})
        return value

    @staticmethod
    def _apply_pricing(item: CaseBillingItem) -> None:
        """
        Rewrite every derived field from unit_price / quantity / discount / status.
        """
        pricing = line_pricing(
            unit_price=item.unit_price,
            quantity=item.quantity,
            discount_percent=item.discount_percent,
        )
        item.discounted_price = pricing.discounted_price
        item.total_price = pricing.total_price
        item.requires_approval = requires_approval_for(
            discount_percent=item.discount_percent,
            status=item.status,
        )

    @staticmethod
    @transaction.atomic
    def add_article_to_case(
        *,
        case_id: UUID,
        case_type: str,
        unit_price,
        price_source: str = PriceSource.STANDARD,
        article_id: UUID | None = None,
        article_code: str = "",
        article_name: str = "",
        customer_id: UUID | None = None,
        quantity: int = 1,
        discount_percent=Decimal("0.00"),
        vat_rate=None,
        added_by_technician_id: int | None = None,
        added_by_technician_name: str = "",
        notes: str = "",
    ) -> CaseBillingItem:
        """
        Adds a line with an already resolved price (see pricing.resolution).
        Code/name/VAT default from the article when it is given.
        """
        if case_type not in BillableCaseType.values:
            raise ValidationError({"case_type": f"Unknown case type '{case_type}'."})
        if price_source not in PriceSource.values:
            raise ValidationError({"price_source": f"Unknown price source '{price_source}'."})

        unit_price = quantize_money(to_decimal(unit_price, "unit_price"))
        if unit_price < ZERO:
            raise ValidationError({"unit_price": "Must be >= 0."})

        quantity = CaseBillingService._validate_quantity(quantity)
        discount_percent = CaseBillingService._validate_discount(discount_percent)

        article = get_article(article_id=article_id) if article_id else None
        if article is not None:
            article_code = article_code or article.code
            article_name = article_name or article.name
            if vat_rate is None:
                vat_rate = article.vat_rate

        article_name = (article_name or "").strip()
        if not article_name:
            raise ValidationError({"article_name": "Article name is required."})

        vat_rate = CaseBillingService._validate_percent(
            default_vat_rate() if vat_rate is None else vat_rate,
            "vat_rate",
        )

        item = CaseBillingItem(
            case_id=case_id,
            case_type=case_type,
            customer_id=customer_id,
            article=article,
            article_code=(article_code or "").strip().upper(),
            article_name=article_name,
            quantity=quantity,
            unit_price=unit_price,
            discount_percent=discount_percent,
            vat_rate=vat_rate,
            price_source=price_source,
            status=CaseBillingItemStatus.PENDING,
            added_by_technician_id=added_by_technician_id,
            added_by_technician_name=added_by_technician_name or "",
            notes=notes or "",
        )
        CaseBillingService._apply_pricing(item)

        if has_discount(discount_percent):
            queue_discount_notification(item)

        item.save()
        logger.info(
            "Added %s x%s to %s/%s at %s (%s)",
            item.article_code or item.article_name,
            quantity,
            case_type,
            case_id,
            unit_price,
            price_source,
        )
        return item

    @staticmethod
    @transaction.atomic
    def update_case_article(
        *,
        item_id: UUID,
        quantity=_UNSET,
        discount_percent=_UNSET,
        notes=_UNSET,
        requested_by_id: int | None = None,
        requested_by_name: str = "",
    ) -> CaseBillingItem:
        """
        Re-reads the frozen unit_price and recomputes every derived field.
        A changed discount on an approved line sends it back to pending.
        `requested_by_*` is the user making this edit; a first discount is
        reported to the admins under that name.
        """
        item = CaseBillingItem.objects.select_for_update().filter(id=item_id).first()
        if item is None:
            raise NotFoundError(f"Billing line {item_id} not found.")
        ensure_editable(item)

        had_discount = has_discount(item.discount_percent)

        if quantity is not _UNSET and quantity is not None:
            item.quantity = CaseBillingService._validate_quantity(quantity)

        if discount_percent is not _UNSET and discount_percent is not None:
            new_discount = CaseBillingService._validate_discount(discount_percent)
            if new_discount != item.discount_percent:
                item.discount_percent = new_discount
                if item.status == CaseBillingItemStatus.APPROVED:
                    item.status = CaseBillingItemStatus.PENDING
                    item.approved_by_user_id = None
                    item.approved_at = None

        if notes is not _UNSET:
            item.notes = notes or ""

        CaseBillingService._apply_pricing(item)

        if not had_discount and has_discount(item.discount_percent):
            queue_discount_notification(
                item,
                requested_by_id=requested_by_id,
                requested_by_name=requested_by_name,
            )

        item.save()
        return item

    @staticmethod
    @transaction.atomic
    def remove_case_article(*, item_id: UUID) -> None:
        deleted, _ = CaseBillingItem.objects.filter(id=item_id).delete()
        if not deleted:
            raise NotFoundError(f"Billing line {item_id} not found.")
