# fs_core/catalog/services.py
from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError
from rest_framework.exceptions import ValidationError

from fs_core.catalog.models import DEFAULT_CATEGORY, Article, ArticleUnit
from fs_core.catalog.selectors import get_article
from fs_core.common.api.exceptions import ConflictError, DependencyError
from fs_core.common.money import HUNDRED, ZERO, quantize_money, to_decimal

logger = logging.getLogger(__name__)

_UNSET = object()


class ArticleService:
    @staticmethod
    def _normalize_code(code) -> str:
        code = (code or "").strip().upper()
        if not code:
            raise ValidationError({"code": "Code is required."})
        return code

    @staticmethod
    def _normalize_name(name) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": "Name is required."})
        return name

    @staticmethod
    def _validate_price(value) -> Decimal:
        price = quantize_money(to_decimal(value, "default_price"))
        if price < ZERO:
            raise ValidationError({"default_price": "Must be >= 0."})
        return price

    @staticmethod
    def _validate_vat(value) -> Decimal:
        vat = quantize_money(to_decimal(value, "vat_rate"))
        if vat < ZERO or vat > HUNDRED:
            raise ValidationError({"vat_rate": "Must be between 0 and 100."})
        return vat

    @staticmethod
    def _validate_unit(unit: str) -> str:
        if unit not in ArticleUnit.values:
            raise ValidationError({"unit": f"Unknown unit '{unit}'."})
        return unit

    @staticmethod
    def _ensure_code_free(code: str, *, exclude_id: UUID | None = None) -> None:
        qs = Article.objects.filter(code=code)
        if exclude_id is not None:
            qs = qs.exclude(id=exclude_id)
        if qs.exists():
            raise ConflictError(f"Article code '{code}' already exists.", code="duplicate_code")

    @staticmethod
    @transaction.atomic
    def create(
        *,
        code: str,
        name: str,
        default_price=Decimal("0.00"),
        vat_rate=Decimal("25.00"),
        unit: str = ArticleUnit.PIECE,
        category: str = DEFAULT_CATEGORY,
        sort_order: int = 0,
        description: str = "",
        is_active: bool = True,
    ) -> Article:
        code = ArticleService._normalize_code(code)
        name = ArticleService._normalize_name(name)
        default_price = ArticleService._validate_price(default_price)
        vat_rate = ArticleService._validate_vat(vat_rate)
        unit = ArticleService._validate_unit(unit)

        ArticleService._ensure_code_free(code)

        try:
            with transaction.atomic():
                return Article.objects.create(
                    code=code,
                    name=name,
                    description=description or "",
                    unit=unit,
                    default_price=default_price,
                    vat_rate=vat_rate,
                    category=(category or "").strip() or DEFAULT_CATEGORY,
                    sort_order=sort_order,
                    is_active=is_active,
                )
        except IntegrityError:
            # lost a race with a concurrent create of the same code
            raise ConflictError(f"Article code '{code}' already exists.", code="duplicate_code")

    @staticmethod
    @transaction.atomic
    def update(
        *,
        article_id: UUID,
        code=_UNSET,
        name=_UNSET,
        default_price=_UNSET,
        vat_rate=_UNSET,
        unit=_UNSET,
        category=_UNSET,
        sort_order=_UNSET,
        description=_UNSET,
        is_active=_UNSET,
    ) -> Article:
        article = get_article(article_id=article_id)

        if code is not _UNSET:
            article.code = ArticleService._normalize_code(code)
            ArticleService._ensure_code_free(article.code, exclude_id=article.id)
        if name is not _UNSET:
            article.name = ArticleService._normalize_name(name)
        if default_price is not _UNSET:
            article.default_price = ArticleService._validate_price(default_price)
        if vat_rate is not _UNSET:
            article.vat_rate = ArticleService._validate_vat(vat_rate)
        if unit is not _UNSET:
            article.unit = ArticleService._validate_unit(unit)
        if category is not _UNSET:
            article.category = (category or "").strip() or DEFAULT_CATEGORY
        if sort_order is not _UNSET:
            article.sort_order = sort_order
        if description is not _UNSET:
            article.description = description or ""
        if is_active is not _UNSET:
            article.is_active = bool(is_active)

        article.save()
        return article

    @staticmethod
    def set_active(*, article_id: UUID, is_active: bool) -> Article:
        return ArticleService.update(article_id=article_id, is_active=is_active)

    @staticmethod
    @transaction.atomic
    def delete(*, article_id: UUID) -> None:
        """
        Hard delete. Refused while any price list still prices the article;
        billing lines keep their code/name snapshot and lose the reference.
        """
        article = get_article(article_id=article_id)
        try:
            article.delete()
        except ProtectedError:
            raise DependencyError(
                f"Article {article.code} is used by a price list; deactivate it instead.",
            )
        logger.info("Deleted article %s", article.code)
