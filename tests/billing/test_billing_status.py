from datetime import date
from decimal import Decimal

from src.condo_system.condo_system.billing.calculator.ideal_fraction_calculator import IdealFractionCalculator
from src.condo_system.condo_system.billing.status import resolve_status
from src.condo_system.condo_system.core.enums import BillingStatus

TODAY = date(2025, 3, 10)


def _status(current=BillingStatus.PENDING, paid="0", due=date(2025, 3, 20)):
    return resolve_status(
        current=current,
        total_amount=Decimal("250.00"),
        amount_paid=Decimal(paid),
        due_date=due,
        today=TODAY,
    )


def test_unpaid_before_due_is_pending():
    assert _status() == BillingStatus.PENDING


def test_unpaid_after_due_is_overdue():
    assert _status(due=date(2025, 3, 9)) == BillingStatus.OVERDUE


def test_due_today_is_not_overdue():
    assert _status(due=TODAY) == BillingStatus.PENDING


def test_partial_payment_wins_over_overdue():
    assert _status(paid="10", due=date(2025, 3, 1)) == BillingStatus.PARTIALLY_PAID


def test_overpayment_counts_as_paid():
    assert _status(paid="300") == BillingStatus.PAID


def test_cancelled_is_sticky():
    assert _status(current=BillingStatus.CANCELLED, paid="250") == BillingStatus.CANCELLED


def test_calculator_rounds_half_up_to_cents():
    amounts = IdealFractionCalculator().amounts(
        base_value=Decimal("1000.00"),
        ideal_fraction=Decimal("0.012345"),
        additional_charges=Decimal("0.00"),
        discounts=Decimal("0.00"),
    )
    # 12.345 -> 12.35
    assert amounts.base_amount == Decimal("12.35")
    assert amounts.total_amount == Decimal("12.35")
