from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from src.condo_system.condo_system.core.enums import BillingStatus
from src.condo_system.condo_system.core.exceptions import (
    BusinessRuleError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


@pytest.fixture
def fee(container, condo):
    return container.monthly_fee_service.create(
        {
            "condominium_id": condo.condominium.id,
            "reference_month": "2025-03-15",
            "base_value": "1000",
            "due_date": "2025-03-20",
        }
    )


def _pay(container, billing, amount, day="2025-03-12", **extra):
    payload = {"unit_billing_id": billing.id, "amount_paid": amount, "payment_date": day}
    payload.update(extra)
    return container.payment_service.create(payload)


def test_reference_month_is_first_day(fee):
    assert fee.reference_month == date(2025, 3, 1)
    assert fee.base_value == Decimal("1000.00")


def test_generate_splits_evenly_across_active_units(container, condo, fee):
    billings = container.unit_billing_service.generate({"monthly_fee_id": fee.id})

    assert len(billings) == 4
    assert {b.unit_id for b in billings} == {u.id for u in condo.units}
    for b in billings:
        assert b.ideal_fraction == Decimal("0.250000")
        assert b.base_amount == Decimal("250.00")
        assert b.total_amount == Decimal("250.00")
        assert b.status == BillingStatus.PENDING
        assert b.due_date == date(2025, 3, 20)


def test_generate_skips_inactive_units(container, condo, fee):
    container.unit_service.update(condo.units[3].id, {"active": False})
    billings = container.unit_billing_service.generate({"monthly_fee_id": fee.id})
    assert len(billings) == 3
    assert billings[0].ideal_fraction == Decimal("0.333333")
    assert billings[0].base_amount == Decimal("333.33")


def test_generate_with_explicit_fractions_and_charges(container, condo, fee):
    unit = condo.units[0]
    (b,) = container.unit_billing_service.generate(
        {
            "monthly_fee_id": fee.id,
            "units": [{"unit_id": unit.id, "ideal_fraction": "0.3", "additional_charges": "20", "discounts": "5"}],
        }
    )
    assert b.base_amount == Decimal("300.00")
    assert b.total_amount == Decimal("315.00")


def test_generate_twice_conflicts(container, fee):
    container.unit_billing_service.generate({"monthly_fee_id": fee.id})
    with pytest.raises(ConflictError) as exc:
        container.unit_billing_service.generate({"monthly_fee_id": fee.id})
    assert len(exc.value.conflicts) == 4


def test_generate_rejects_repeated_unit(container, condo, fee):
    unit = condo.units[0]
    with pytest.raises(ValidationError):
        container.unit_billing_service.generate(
            {"monthly_fee_id": fee.id, "units": [{"unit_id": unit.id}, {"unit_id": unit.id}]}
        )


def test_generate_rejects_negative_total(container, condo, fee):
    with pytest.raises(ValidationError):
        container.unit_billing_service.generate(
            {
                "monthly_fee_id": fee.id,
                "units": [{"unit_id": condo.units[0].id, "ideal_fraction": "0.1", "discounts": "500"}],
            }
        )


def test_generate_for_cancelled_fee(container, fee):
    container.monthly_fee_service.update(fee.id, {"status": "cancelled"})
    with pytest.raises(BusinessRuleError):
        container.unit_billing_service.generate({"monthly_fee_id": fee.id})


def test_generate_without_units(container):
    empty = container.condominium_service.create({"name": "Vazio"})
    f = container.monthly_fee_service.create(
        {"condominium_id": empty.id, "reference_month": "2025-03-01", "base_value": "10", "due_date": "2025-03-20"}
    )
    with pytest.raises(BusinessRuleError):
        container.unit_billing_service.generate({"monthly_fee_id": f.id})


def test_generate_unknown_fee(container):
    with pytest.raises(NotFoundError):
        container.unit_billing_service.generate({"monthly_fee_id": 404})


def test_payments_drive_billing_status(container, fee):
    b = container.unit_billing_service.generate({"monthly_fee_id": fee.id})[0]

    first = _pay(container, b, "100", day="2025-03-11")
    b = container.unit_billing_service.get(b.id)
    assert b.status == BillingStatus.PARTIALLY_PAID
    assert b.amount_paid == Decimal("100.00")
    assert b.balance == Decimal("150.00")

    _pay(container, b, "150", day="2025-03-12", payment_method="pix")
    b = container.unit_billing_service.get(b.id)
    assert b.status == BillingStatus.PAID
    assert b.payment_date == date(2025, 3, 12)

    container.payment_service.delete(first.id)
    b = container.unit_billing_service.get(b.id)
    assert b.status == BillingStatus.PARTIALLY_PAID
    assert b.amount_paid == Decimal("150.00")


def test_payment_amount_must_be_positive(container, fee):
    b = container.unit_billing_service.generate({"monthly_fee_id": fee.id})[0]
    with pytest.raises(ValidationError):
        _pay(container, b, "0")


def test_refresh_status_marks_overdue(container, fee, clock):
    b = container.unit_billing_service.generate({"monthly_fee_id": fee.id})[0]
    clock.now = datetime(2025, 3, 21, 8, 0)

    refreshed = container.unit_billing_service.refresh_status(b.id)
    assert refreshed.status == BillingStatus.OVERDUE
    assert refreshed.days_overdue(clock.now.date()) == 1

    overdue = container.unit_billing_service.list(overdue=True)
    assert len(overdue) == 4


def test_update_fraction_recomputes_base(container, fee):
    b = container.unit_billing_service.generate({"monthly_fee_id": fee.id})[0]
    updated = container.unit_billing_service.update(b.id, {"ideal_fraction": "0.5"})
    assert updated.base_amount == Decimal("500.00")
    assert updated.total_amount == Decimal("500.00")


def test_manual_billing_for_already_billed_unit(container, condo, fee):
    container.unit_billing_service.generate({"monthly_fee_id": fee.id})
    with pytest.raises(ConflictError):
        container.unit_billing_service.create({"monthly_fee_id": fee.id, "unit_id": condo.units[0].id})


def test_fee_statistics(container, fee):
    billings = container.unit_billing_service.generate({"monthly_fee_id": fee.id})
    _pay(container, billings[0], "250")
    _pay(container, billings[1], "50")

    stats = container.monthly_fee_service.statistics(fee.id)
    assert stats["total_units"] == 4
    assert stats["paid_units"] == 1
    assert stats["partially_paid_units"] == 1
    assert stats["total_expected"] == Decimal("1000.00")
    assert stats["total_collected"] == Decimal("300.00")
    assert stats["total_pending"] == Decimal("700.00")
    assert stats["collection_rate"] == Decimal("25.00")


def test_export_rows_sorted_by_unit_number(container, fee):
    container.unit_billing_service.generate({"monthly_fee_id": fee.id})
    _, rows = container.monthly_fee_service.export_rows(fee.id)
    assert [r["unit_number"] for r in rows] == ["101", "101", "102", "102"]
    assert rows[0]["total_amount"] == "250.00"
    assert rows[0]["payment_date"] == ""


def test_payment_statistics_by_method(container, condo, fee):
    billings = container.unit_billing_service.generate({"monthly_fee_id": fee.id})
    _pay(container, billings[0], "250", payment_method="pix")
    _pay(container, billings[1], "100", payment_method="cash", day="2025-03-05")
    _pay(container, billings[2], "30", payment_method="pix", day="2025-04-02")

    stats = container.payment_service.statistics(
        start_date="2025-03-01", end_date="2025-03-31", condominium_id=condo.condominium.id
    )
    assert stats["total_payments"] == 2
    assert stats["total_amount"] == Decimal("350.00")
    assert stats["by_method"]["pix"] == Decimal("250.00")
    assert stats["by_method"]["cash"] == Decimal("100.00")
    assert stats["by_source"]["manual"] == Decimal("350.00")


def test_payment_statistics_rejects_reversed_range(container):
    with pytest.raises(ValidationError):
        container.payment_service.statistics(start_date="2025-03-31", end_date="2025-03-01")
