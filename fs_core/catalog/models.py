# fs_core/catalog/models.py
from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from fs_core.common.models import UUIDModel


class ArticleUnit(models.TextChoices):
    PIECE = "st", "Piece"
    HOUR = "tim", "Hour"
    METER = "m", "Meter"
    SQUARE_METER = "m2", "Square meter"
    KILOGRAM = "kg", "Kilogram"
    LITER = "l", "Liter"
    PACKAGE = "pkt", "Package"


DEFAULT_CATEGORY = "Other"


class Article(UUIDModel):
    """
    Catalog entry a technician can bill.
    Code is stored uppercase and unique; articles referenced by a price list
    are deactivated rather than deleted.
    """
    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")

    unit = models.CharField(max_length=8, choices=ArticleUnit.choices, default=ArticleUnit.PIECE)
    default_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    vat_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("25.00"),
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("100.00"))],
    )

    category = models.CharField(max_length=64, default=DEFAULT_CATEGORY, db_index=True)
    sort_order = models.IntegerField(default=0)

    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        db_table = "catalog_article"
        ordering = ["category", "sort_order", "name"]
        indexes = [
            models.Index(fields=["is_active", "category", "sort_order"], name="catalog_art_active_cat_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.code} {self.name}"
