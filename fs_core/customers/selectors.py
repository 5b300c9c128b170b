# fs_core/customers/selectors.py
from __future__ import annotations

from uuid import UUID

from fs_core.customers.models import Customer


def assigned_price_list_id(*, customer_id: UUID | None) -> UUID | None:
    """
    customer -> assigned price list id. Unknown customers and customers
    without a list both yield None.
    """
    if not customer_id:
        return None
    return (
        Customer.objects.filter(id=customer_id)
        .values_list("price_list_id", flat=True)
        .first()
    )
