from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class BillingAmounts:
    base_amount: Decimal
    total_amount: Decimal


class BillingCalculator(ABC):
    """Turns a monthly fee into one unit's amounts (Strategy Pattern)."""

    @abstractmethod
    def amounts(
        self,
        *,
        base_value: Decimal,
        ideal_fraction: Decimal,
        additional_charges: Decimal,
        discounts: Decimal,
    ) -> BillingAmounts:
        raise NotImplementedError
