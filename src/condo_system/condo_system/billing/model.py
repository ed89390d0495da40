from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import BillingStatus, MonthlyFeeStatus, PaymentMethod, PaymentSource

ZERO = Decimal("0.00")


@dataclass(frozen=True)
class MonthlyFee:
    id: int
    condominium_id: int
    reference_month: date
    base_value: Decimal
    due_date: date
    issue_date: Optional[date] = None
    status: MonthlyFeeStatus = MonthlyFeeStatus.DRAFT
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def can_generate(self) -> bool:
        return self.status not in (MonthlyFeeStatus.CANCELLED, MonthlyFeeStatus.CLOSED)


@dataclass(frozen=True)
class UnitBilling:
    id: int
    monthly_fee_id: int
    unit_id: int
    base_amount: Decimal
    total_amount: Decimal
    due_date: date
    ideal_fraction: Decimal = Decimal("0")
    additional_charges: Decimal = ZERO
    discounts: Decimal = ZERO
    barcode: Optional[str] = None
    digitable_line: Optional[str] = None
    our_number: Optional[str] = None
    status: BillingStatus = BillingStatus.PENDING
    payment_date: Optional[date] = None
    amount_paid: Decimal = ZERO
    late_fee: Decimal = ZERO
    interest: Decimal = ZERO
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def balance(self) -> Decimal:
        return self.total_amount + self.late_fee + self.interest - self.amount_paid

    def is_overdue(self, today: date) -> bool:
        return self.status not in (BillingStatus.PAID, BillingStatus.CANCELLED) and self.due_date < today

    def days_overdue(self, today: date) -> int:
        return (today - self.due_date).days if self.is_overdue(today) else 0

    def to_dict(self, today: date) -> dict:
        return {
            **asdict(self),
            "balance": self.balance,
            "is_overdue": self.is_overdue(today),
            "days_overdue": self.days_overdue(today),
        }


@dataclass(frozen=True)
class Payment:
    id: int
    unit_billing_id: int
    payment_date: date
    amount_paid: Decimal
    payment_method: PaymentMethod = PaymentMethod.BANK_SLIP
    reference: Optional[str] = None
    bank_reference: Optional[str] = None
    source: PaymentSource = PaymentSource.MANUAL
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
