# fs_core/customers/models.py
from __future__ import annotations

from django.db import models

from fs_core.common.models import UUIDModel


class Customer(UUIDModel):
    """
    Local view of the customer directory. Pricing only consumes the
    assigned price list.
    """
    name = models.CharField(max_length=255)
    price_list = models.ForeignKey(
        "pricing.PriceList",
        on_delete=models.SET_NULL,
        related_name="customers",
        null=True,
        blank=True,
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "customers_customer"

    def __str__(self) -> str:
        return self.name
