# fs_core/case_billing/models.py
from __future__ import annotations

from decimal import Decimal

from django.db import models

from fs_core.catalog.models import Article
from fs_core.common.models import UUIDModel
from fs_core.pricing.models import PriceSource


class BillableCaseType(models.TextChoices):
    PRIVATE = "private", "Private"
    BUSINESS = "business", "Business"
    CONTRACT = "contract", "Contract"


class CaseBillingItemStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    BILLED = "billed", "Billed"
    CANCELLED = "cancelled", "Cancelled"


class CaseBillingItem(UUIDModel):
    """
    One billable line on a job.

    unit_price and vat_rate are snapshots taken when the technician adds the
    article and never change afterwards. discounted_price, total_price and
    requires_approval are derived and rewritten together on every mutation
    (see case_billing.calculations).
    """
    # Opaque job key; jobs live in another system.
    case_id = models.UUIDField(db_index=True)
    case_type = models.CharField(max_length=16, choices=BillableCaseType.choices)

    customer_id = models.UUIDField(null=True, blank=True, db_index=True)

    article = models.ForeignKey(
        Article,
        on_delete=models.SET_NULL,
        related_name="billing_items",
        null=True,
        blank=True,
    )
    article_code = models.CharField(max_length=32, blank=True, default="")
    article_name = models.CharField(max_length=255)

    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    discount_percent = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))
    discounted_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=12, decimal_places=2)
    vat_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("25.00"))

    price_source = models.CharField(max_length=16, choices=PriceSource.choices, default=PriceSource.STANDARD)

    status = models.CharField(
        max_length=16,
        choices=CaseBillingItemStatus.choices,
        default=CaseBillingItemStatus.PENDING,
        db_index=True,
    )
    # status-aware: true only while a discounted line is pending review
    requires_approval = models.BooleanField(default=False, db_index=True)

    added_by_technician_id = models.IntegerField(null=True, blank=True)
    added_by_technician_name = models.CharField(max_length=255, blank=True, default="")

    approved_by_user_id = models.IntegerField(null=True, blank=True)
    approved_at = models.DateTimeField(null=True, blank=True)

    # Set once, when admins were first told about a discount on this line.
    discount_notified_at = models.DateTimeField(null=True, blank=True)

    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "case_billing_item"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["case_id", "case_type", "created_at"], name="cb_item_case_idx"),
            models.Index(fields=["requires_approval", "status", "created_at"], name="cb_item_approval_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.case_type}:{self.case_id} {self.article_name} x{self.quantity}"
