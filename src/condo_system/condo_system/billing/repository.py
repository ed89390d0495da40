from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import BillingStatus, MonthlyFeeStatus, PaymentMethod
from .model import MonthlyFee, Payment, UnitBilling


class MonthlyFeeRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, monthly_fee_id: int) -> Optional[MonthlyFee]:
        raise NotImplementedError

    def update(self, *, monthly_fee_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, monthly_fee_id: int) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        condominium_id: Optional[int] = None,
        status: Optional[MonthlyFeeStatus] = None,
        reference_month: Optional[date] = None,
        year: Optional[int] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[MonthlyFee]:
        """Ordered by reference_month desc."""

        raise NotImplementedError


class UnitBillingRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def create_many(self, *, rows: Sequence[dict]) -> list[int]:
        """Insert all rows in a single transaction."""

        raise NotImplementedError

    def get(self, *, unit_billing_id: int) -> Optional[UnitBilling]:
        raise NotImplementedError

    def update(self, *, unit_billing_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, unit_billing_id: int) -> bool:
        raise NotImplementedError

    def billed_unit_ids(self, *, monthly_fee_id: int, unit_ids: Iterable[int]) -> set[int]:
        raise NotImplementedError

    def list(
        self,
        *,
        monthly_fee_id: Optional[int] = None,
        unit_id: Optional[int] = None,
        status: Optional[BillingStatus] = None,
        condominium_id: Optional[int] = None,
        overdue_on: Optional[date] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[UnitBilling]:
        """`overdue_on`: only unpaid, non-cancelled rows due before that date."""

        raise NotImplementedError


class PaymentRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, payment_id: int) -> Optional[Payment]:
        raise NotImplementedError

    def update(self, *, payment_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, payment_id: int) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        unit_billing_id: Optional[int] = None,
        condominium_id: Optional[int] = None,
        payment_method: Optional[PaymentMethod] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Payment]:
        """Ordered by payment_date desc. Date bounds are inclusive."""

        raise NotImplementedError
