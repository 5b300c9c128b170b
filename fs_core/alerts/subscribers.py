# fs_core/alerts/subscribers.py
from __future__ import annotations

import logging

from fs_core.alerts.models import NotificationKind
from fs_core.alerts.selectors import admin_user_ids
from fs_core.alerts.services import NotificationService
from fs_core.case_billing.workflow import DISCOUNT_REQUESTED
from fs_core.common.events import subscribe

logger = logging.getLogger(__name__)

CASE_TYPE_LABELS = {
    "private": "private job",
    "business": "business job",
    "contract": "contract job",
}


@subscribe(DISCOUNT_REQUESTED)
def notify_admins_of_discount_request(payload: dict) -> None:
    recipients = admin_user_ids()
    if not recipients:
        logger.warning("Discount request on line %s but no admins to notify", payload.get("line_id"))
        return

    technician = payload.get("technician_name") or "A technician"
    article = payload.get("article_name") or payload.get("article_code") or "an article"
    case_label = CASE_TYPE_LABELS.get(payload.get("case_type"), "job")

    NotificationService.notify_users_in_app(
        user_ids=recipients,
        kind=NotificationKind.DISCOUNT_REQUEST,
        title=f"Discount of {payload.get('discount_percent')}% needs approval",
        body=f"{technician} added a {payload.get('discount_percent')}% discount on {article} ({case_label} {payload.get('case_id')}).",
        meta=dict(payload),
    )
    logger.info("Notified %s admin(s) of discount on line %s", len(recipients), payload.get("line_id"))
