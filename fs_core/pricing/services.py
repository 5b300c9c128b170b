# fs_core/pricing/services.py
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from uuid import UUID

from django.db import IntegrityError, transaction
from rest_framework.exceptions import ValidationError

from fs_core.catalog.selectors import get_article
from fs_core.common.api.exceptions import ConflictError, NotFoundError
from fs_core.common.money import HUNDRED, ZERO, quantize_money, to_decimal
from fs_core.pricing.models import PriceList, PriceListItem
from fs_core.pricing.selectors import get_price_list, price_list_items

logger = logging.getLogger(__name__)

_UNSET = object()


class PriceListService:
    @staticmethod
    def _normalize_name(name) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": "Name is required."})
        return name

    @staticmethod
    def _validate_window(valid_from: date | None, valid_to: date | None) -> None:
        if valid_from and valid_to and valid_from > valid_to:
            raise ValidationError({"valid_to": "Must be on or after valid_from."})

    @staticmethod
    def _demote_defaults(*, keep_id: UUID | None = None) -> int:
        """
        Clear is_default everywhere (except keep_id). Always runs before a
        list is promoted so the single-default constraint holds.
        """
        qs = PriceList.objects.filter(is_default=True)
        if keep_id is not None:
            qs = qs.exclude(id=keep_id)
        return qs.update(is_default=False)

    @staticmethod
    def _promote_and_save(save, *, keep_id: UUID | None = None):
        """
        Demote the current default, then run `save`. A rival promotion that
        committed in between trips the single-default constraint: demote
        again and retry once, so the last writer wins.
        """
        PriceListService._demote_defaults(keep_id=keep_id)
        try:
            with transaction.atomic():
                return save()
        except IntegrityError:
            demoted = PriceListService._demote_defaults(keep_id=keep_id)
            logger.warning("Default price list changed concurrently, demoted %s and retrying", demoted)

        try:
            with transaction.atomic():
                return save()
        except IntegrityError:
            raise ConflictError(
                "The default price list was changed by someone else. Try again.",
                code="default_changed",
            )

    @staticmethod
    @transaction.atomic
    def create(
        *,
        name: str,
        description: str = "",
        is_default: bool = False,
        is_active: bool = True,
        valid_from: date | None = None,
        valid_to: date | None = None,
    ) -> PriceList:
        name = PriceListService._normalize_name(name)
        PriceListService._validate_window(valid_from, valid_to)

        def save() -> PriceList:
            return PriceList.objects.create(
                name=name,
                description=description or "",
                is_default=bool(is_default),
                is_active=bool(is_active),
                valid_from=valid_from,
                valid_to=valid_to,
            )

        if not is_default:
            return save()

        price_list = PriceListService._promote_and_save(save)
        logger.info("New default price list %s (%r)", price_list.id, name)
        return price_list

    @staticmethod
    @transaction.atomic
    def update(
        *,
        price_list_id: UUID,
        name=_UNSET,
        description=_UNSET,
        is_default=_UNSET,
        is_active=_UNSET,
        valid_from=_UNSET,
        valid_to=_UNSET,
    ) -> PriceList:
        price_list = get_price_list(price_list_id=price_list_id)
        promoting = is_default is True and not price_list.is_default

        if name is not _UNSET:
            price_list.name = PriceListService._normalize_name(name)
        if description is not _UNSET:
            price_list.description = description or ""
        if is_default is not _UNSET:
            price_list.is_default = bool(is_default)
        if is_active is not _UNSET:
            price_list.is_active = bool(is_active)
        if valid_from is not _UNSET:
            price_list.valid_from = valid_from
        if valid_to is not _UNSET:
            price_list.valid_to = valid_to

        PriceListService._validate_window(price_list.valid_from, price_list.valid_to)

        if not promoting:
            price_list.save()
            return price_list

        PriceListService._promote_and_save(price_list.save, keep_id=price_list.id)
        logger.info("Promoted price list %s to default", price_list.id)
        return price_list

    @staticmethod
    @transaction.atomic
    def delete(*, price_list_id: UUID) -> None:
        """
        Items cascade; customers assigned to the list fall back to tier 2.
        """
        price_list = get_price_list(price_list_id=price_list_id)
        if price_list.is_default:
            raise ConflictError("Cannot delete the default price list.", code="cannot_delete_default")

        price_list.delete()
        logger.info("Deleted price list %s (%s)", price_list_id, price_list.name)

    @staticmethod
    @transaction.atomic
    def copy(*, source_id: UUID, new_name: str) -> PriceList:
        """
        New active, non-default list with every source item. Runs in one
        transaction: a failing item aborts the whole copy.
        """
        source = get_price_list(price_list_id=source_id)

        if source.description:
            description = f"Copy of {source.name}: {source.description}"
        else:
            description = f"Copy of {source.name}"

        target = PriceListService.create(
            name=new_name,
            description=description,
            is_default=False,
            is_active=True,
        )

        copied = 0
        for item in price_list_items(price_list_id=source.id):
            PriceListService.upsert_item(
                price_list_id=target.id,
                article_id=item.article_id,
                custom_price=item.custom_price,
                discount_percent=item.discount_percent,
            )
            copied += 1

        logger.info("Copied price list %s -> %s (%s items)", source.id, target.id, copied)
        return target

    @staticmethod
    @transaction.atomic
    def upsert_item(
        *,
        price_list_id: UUID,
        article_id: UUID,
        custom_price,
        discount_percent=Decimal("0.00"),
    ) -> PriceListItem:
        custom_price = quantize_money(to_decimal(custom_price, "custom_price"))
        discount_percent = quantize_money(to_decimal(discount_percent, "discount_percent"))

        if custom_price < ZERO:
            raise ValidationError({"custom_price": "Must be >= 0."})
        if discount_percent < ZERO or discount_percent > HUNDRED:
            raise ValidationError({"discount_percent": "Must be between 0 and 100."})

        price_list = get_price_list(price_list_id=price_list_id)
        article = get_article(article_id=article_id)

        item, _ = PriceListItem.objects.update_or_create(
            price_list=price_list,
            article=article,
            defaults={
                "custom_price": custom_price,
                "discount_percent": discount_percent,
            },
        )
        return item

    @staticmethod
    @transaction.atomic
    def remove_item(*, price_list_id: UUID, article_id: UUID) -> None:
        deleted, _ = PriceListItem.objects.filter(price_list_id=price_list_id, article_id=article_id).delete()
        if not deleted:
            raise NotFoundError("Article is not in this price list.")
