from __future__ import annotations

from datetime import date
from decimal import Decimal

from ..core.enums import BillingStatus


def resolve_status(
    *,
    current: BillingStatus,
    total_amount: Decimal,
    amount_paid: Decimal,
    due_date: date,
    today: date,
) -> BillingStatus:
    if current == BillingStatus.CANCELLED:
        return current
    if amount_paid >= total_amount:
        return BillingStatus.PAID
    if amount_paid > 0:
        return BillingStatus.PARTIALLY_PAID
    if due_date < today:
        return BillingStatus.OVERDUE
    return BillingStatus.PENDING
