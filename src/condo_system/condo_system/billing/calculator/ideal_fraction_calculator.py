from __future__ import annotations

from decimal import Decimal

from ...common.validators import to_money
from .base import BillingAmounts, BillingCalculator


class IdealFractionCalculator(BillingCalculator):
    """base = base_value * fraction; total = base + charges - discounts (cents, half-up)."""

    def amounts(
        self,
        *,
        base_value: Decimal,
        ideal_fraction: Decimal,
        additional_charges: Decimal,
        discounts: Decimal,
    ) -> BillingAmounts:
        base_amount = to_money(base_value * ideal_fraction)
        total_amount = to_money(base_amount + additional_charges - discounts)
        return BillingAmounts(base_amount=base_amount, total_amount=total_amount)
