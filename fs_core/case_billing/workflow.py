# fs_core/case_billing/workflow.py
"""
Discount approval workflow.

    pending  -> approved -> billed
    pending  -> cancelled
    approved -> cancelled
    approved -> pending      (discount changed after approval)
    pending  -> billed       (only lines that need no approval)

billed / cancelled are written by invoicing and case closure flows; this
module only validates those writes.
"""
from __future__ import annotations

import logging
from uuid import UUID

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from fs_core.case_billing.calculations import has_discount
from fs_core.case_billing.models import BillableCaseType, CaseBillingItem, CaseBillingItemStatus
from fs_core.common.api.exceptions import ConflictError, NotFoundError
from fs_core.common.events import publish_on_commit

logger = logging.getLogger(__name__)

DISCOUNT_REQUESTED = "case_billing.discount_requested"

S = CaseBillingItemStatus

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    S.PENDING: frozenset({S.APPROVED, S.BILLED, S.CANCELLED}),
    S.APPROVED: frozenset({S.PENDING, S.BILLED, S.CANCELLED}),
    S.BILLED: frozenset(),
    S.CANCELLED: frozenset(),
}

EDITABLE_STATUSES = frozenset({S.PENDING, S.APPROVED})


def requires_approval_for(*, discount_percent, status: str) -> bool:
    """
    A discounted line needs review while pending. Approval clears the flag
    until the discount changes again (which moves the line back to pending).
    """
    return has_discount(discount_percent) and status == S.PENDING


def can_transition(item: CaseBillingItem, target: str) -> bool:
    if target not in ALLOWED_TRANSITIONS.get(item.status, frozenset()):
        return False
    if item.status == S.PENDING and target == S.BILLED and item.requires_approval:
        return False
    return True


def ensure_transition(item: CaseBillingItem, target: str) -> None:
    if not can_transition(item, target):
        raise ConflictError(
            f"Cannot move billing line from '{item.status}' to '{target}'.",
            code="invalid_transition",
        )


def ensure_editable(item: CaseBillingItem) -> None:
    if item.status not in EDITABLE_STATUSES:
        raise ConflictError(f"Billing line is {item.status} and can no longer be changed.", code="line_locked")


def _validate_status(status: str) -> str:
    if status not in S.values:
        raise ValidationError({"status": f"Unknown status '{status}'."})
    return status


def queue_discount_notification(
    item: CaseBillingItem,
    *,
    requested_by_id: int | None = None,
    requested_by_name: str = "",
) -> None:
    """
    First discount on a line: mark it and tell the admins after commit.
    Later discount edits on the same line do not notify again.
    The requester is whoever set the discount; the line author is only
    used when no requester is given. Caller saves `discount_notified_at`.
    """
    if item.discount_notified_at is not None:
        return

    item.discount_notified_at = timezone.now()
    publish_on_commit(
        DISCOUNT_REQUESTED,
        {
            "line_id": str(item.id),
            "case_id": str(item.case_id),
            "case_type": item.case_type,
            "article_code": item.article_code,
            "article_name": item.article_name,
            "discount_percent": str(item.discount_percent),
            "technician_id": requested_by_id if requested_by_id is not None else item.added_by_technician_id,
            "technician_name": requested_by_name or item.added_by_technician_name,
        },
    )


def _locked_item(item_id: UUID) -> CaseBillingItem:
    item = CaseBillingItem.objects.select_for_update().filter(id=item_id).first()
    if item is None:
        raise NotFoundError(f"Billing line {item_id} not found.")
    return item


class ApprovalService:
    @staticmethod
    @transaction.atomic
    def approve_discount(*, item_id: UUID, approved_by_user_id: int | None = None) -> CaseBillingItem:
        """
        Price fields are left untouched. Approving an already approved line
        is a no-op.
        """
        item = _locked_item(item_id)
        if item.status == S.APPROVED:
            return item
        ensure_transition(item, S.APPROVED)

        item.status = S.APPROVED
        item.requires_approval = False
        item.approved_by_user_id = approved_by_user_id
        item.approved_at = timezone.now()
        item.save(update_fields=["status", "requires_approval", "approved_by_user_id", "approved_at", "updated_at"])

        logger.info("Discount on billing line %s approved by %s", item.id, approved_by_user_id)
        return item

    @staticmethod
    @transaction.atomic
    def set_item_status(*, item_id: UUID, status: str) -> CaseBillingItem:
        status = _validate_status(status)
        item = _locked_item(item_id)
        if item.status == status:
            return item
        ensure_transition(item, status)

        item.status = status
        item.requires_approval = requires_approval_for(discount_percent=item.discount_percent, status=status)
        item.save(update_fields=["status", "requires_approval", "updated_at"])
        return item

    @staticmethod
    @transaction.atomic
    def update_case_items_status(*, case_id: UUID, case_type: str, status: str) -> int:
        """
        Case-level write from invoicing/closure. Lines whose current status
        cannot move to `status` are left as they are. Returns lines changed.
        """
        status = _validate_status(status)
        if case_type not in BillableCaseType.values:
            raise ValidationError({"case_type": f"Unknown case type '{case_type}'."})

        changed = 0
        items = CaseBillingItem.objects.select_for_update().filter(case_id=case_id, case_type=case_type)
        for item in items:
            if item.status == status or not can_transition(item, status):
                continue
            item.status = status
            item.requires_approval = requires_approval_for(discount_percent=item.discount_percent, status=status)
            item.save(update_fields=["status", "requires_approval", "updated_at"])
            changed += 1

        logger.info("Case %s/%s: %s billing line(s) set to %s", case_type, case_id, changed, status)
        return changed
