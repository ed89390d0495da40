from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import first_day_of_month, now_local, to_date
from ..common.validators import (
    merge_payload,
    optional_id,
    optional_str,
    require_id,
    to_bool,
    to_decimal,
    to_enum,
    to_int,
    to_money,
)
from ..core.constants import ALL_ROWS
from ..core.enums import BillingStatus, MonthlyFeeStatus, PaymentMethod, PaymentSource
from ..core.exceptions import BusinessRuleError, ConflictError, NotFoundError, ValidationError
from ..structure.repository import CondominiumRepository, UnitRepository
from .calculator.base import BillingCalculator
from .calculator.ideal_fraction_calculator import IdealFractionCalculator
from .model import ZERO, MonthlyFee, Payment, UnitBilling
from .repository import MonthlyFeeRepository, PaymentRepository, UnitBillingRepository
from .status import resolve_status

logger = logging.getLogger(__name__)

FRACTION_PLACES = Decimal("0.000001")

EXPORT_FIELDS = [
    "unit_id",
    "unit_number",
    "ideal_fraction",
    "base_amount",
    "additional_charges",
    "discounts",
    "total_amount",
    "late_fee",
    "interest",
    "amount_paid",
    "balance",
    "due_date",
    "payment_date",
    "status",
]


def _money_field(payload: dict, key: str) -> Decimal:
    return to_money(to_decimal(payload.get(key), key) or ZERO)


class MonthlyFeeService:
    def __init__(
        self,
        fees: MonthlyFeeRepository,
        billings: UnitBillingRepository,
        condominiums: CondominiumRepository,
        units: UnitRepository,
    ):
        self._fees = fees
        self._billings = billings
        self._condominiums = condominiums
        self._units = units

    def _clean(self, payload: dict) -> dict:
        condominium_id = require_id(payload.get("condominium_id"), "condominium_id")
        if not self._condominiums.get(condominium_id=condominium_id):
            raise NotFoundError("Condominium not found")

        base_value = to_decimal(payload.get("base_value"), "base_value")
        if base_value is None:
            raise ValidationError("base_value is required")

        return {
            "condominium_id": condominium_id,
            "reference_month": first_day_of_month(to_date(payload.get("reference_month"), "reference_month")),
            "base_value": to_money(base_value),
            "due_date": to_date(payload.get("due_date"), "due_date"),
            "issue_date": to_date(payload.get("issue_date"), "issue_date", required=False),
            "status": to_enum(MonthlyFeeStatus, payload.get("status"), "status", default=MonthlyFeeStatus.DRAFT),
            "notes": optional_str(payload.get("notes")),
        }

    def get(self, monthly_fee_id: int) -> MonthlyFee:
        fee = self._fees.get(monthly_fee_id=require_id(monthly_fee_id, "monthly_fee_id"))
        if not fee:
            raise NotFoundError("Monthly fee not found")
        return fee

    def list(
        self,
        *,
        condominium_id=None,
        status=None,
        reference_month=None,
        year=None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[MonthlyFee]:
        ref = to_date(reference_month, "reference_month", required=False)
        return self._fees.list(
            condominium_id=optional_id(condominium_id, "condominium_id"),
            status=to_enum(MonthlyFeeStatus, status, "status") if status else None,
            reference_month=first_day_of_month(ref) if ref else None,
            year=to_int(year, "year", min_value=1900, max_value=9999),
            limit=limit,
            offset=offset,
        )

    def create(self, payload: dict) -> MonthlyFee:
        data = self._clean(payload)
        new_id = self._fees.create(data=data)
        logger.info(
            "Monthly fee %s created: condominium=%s month=%s base=%s",
            new_id,
            data["condominium_id"],
            data["reference_month"],
            data["base_value"],
        )
        return self.get(new_id)

    def update(self, monthly_fee_id: int, payload: dict) -> MonthlyFee:
        existing = self.get(monthly_fee_id)
        data = self._clean(merge_payload(payload, existing))
        self._fees.update(monthly_fee_id=existing.id, data=data)
        return self.get(existing.id)

    def delete(self, monthly_fee_id: int) -> None:
        existing = self.get(monthly_fee_id)
        self._fees.delete(monthly_fee_id=existing.id)

    def statistics(self, monthly_fee_id: int) -> dict:
        fee = self.get(monthly_fee_id)
        rows = self._billings.list(monthly_fee_id=fee.id, limit=ALL_ROWS)

        def count(*statuses: BillingStatus) -> int:
            return sum(1 for b in rows if b.status in statuses)

        total_expected = sum((b.total_amount for b in rows), ZERO)
        total_collected = sum((b.amount_paid for b in rows), ZERO)
        paid_units = count(BillingStatus.PAID)
        rate = (Decimal(paid_units) / Decimal(len(rows)) * 100) if rows else Decimal(0)

        return {
            "total_units": len(rows),
            "paid_units": paid_units,
            "overdue_units": count(BillingStatus.OVERDUE, BillingStatus.PENDING),
            "partially_paid_units": count(BillingStatus.PARTIALLY_PAID),
            "cancelled_units": count(BillingStatus.CANCELLED),
            "total_expected": total_expected,
            "total_collected": total_collected,
            "total_pending": total_expected - total_collected,
            "total_late_fee": sum((b.late_fee for b in rows), ZERO),
            "total_interest": sum((b.interest for b in rows), ZERO),
            "collection_rate": to_money(rate),
        }

    def export_rows(self, monthly_fee_id: int) -> tuple[MonthlyFee, list[dict]]:
        """Rows for the CSV export of a fee, ordered by unit number."""
        fee = self.get(monthly_fee_id)
        numbers: dict[int, str] = {}
        out: list[dict] = []
        for b in self._billings.list(monthly_fee_id=fee.id, limit=ALL_ROWS):
            if b.unit_id not in numbers:
                unit = self._units.get(unit_id=b.unit_id)
                numbers[b.unit_id] = unit.number if unit else ""
            out.append(
                {
                    "unit_id": b.unit_id,
                    "unit_number": numbers[b.unit_id],
                    "ideal_fraction": str(b.ideal_fraction),
                    "base_amount": str(b.base_amount),
                    "additional_charges": str(b.additional_charges),
                    "discounts": str(b.discounts),
                    "total_amount": str(b.total_amount),
                    "late_fee": str(b.late_fee),
                    "interest": str(b.interest),
                    "amount_paid": str(b.amount_paid),
                    "balance": str(b.balance),
                    "due_date": b.due_date.strftime("%Y-%m-%d"),
                    "payment_date": b.payment_date.strftime("%Y-%m-%d") if b.payment_date else "",
                    "status": b.status.value,
                }
            )
        out.sort(key=lambda r: r["unit_number"])
        return fee, out


class UnitBillingService:
    """Fan-out of a monthly fee into one billing per unit, plus manual upkeep."""

    def __init__(
        self,
        billings: UnitBillingRepository,
        fees: MonthlyFeeRepository,
        units: UnitRepository,
        *,
        calculator: Optional[BillingCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._billings = billings
        self._fees = fees
        self._units = units
        self._calculator = calculator or IdealFractionCalculator()
        self._clock = clock

    def today(self) -> date:
        return self._clock().date()

    def _fee(self, monthly_fee_id) -> MonthlyFee:
        fee = self._fees.get(monthly_fee_id=require_id(monthly_fee_id, "monthly_fee_id"))
        if not fee:
            raise NotFoundError("Monthly fee not found")
        return fee

    def _unit_in(self, unit_id, condominium_id: int) -> int:
        unit_id = require_id(unit_id, "unit_id")
        unit = self._units.get(unit_id=unit_id)
        if not unit:
            raise NotFoundError(f"Unit {unit_id} not found")
        if unit.condominium_id != condominium_id:
            raise ValidationError(f"Unit {unit_id} does not belong to the fee's condominium")
        return unit_id

    def _default_entries(self, fee: MonthlyFee) -> list[dict]:
        units = [
            u
            for u in self._units.list_by_condominium(condominium_id=fee.condominium_id, active_only=True, limit=ALL_ROWS)
            if u.active
        ]
        if not units:
            raise BusinessRuleError("The condominium has no active units to bill")
        fraction = (Decimal(1) / Decimal(len(units))).quantize(FRACTION_PLACES)
        return [{"unit_id": u.id, "ideal_fraction": fraction} for u in units]

    def generate(self, payload: dict) -> list[UnitBilling]:
        fee = self._fee(payload.get("monthly_fee_id"))
        if not fee.can_generate:
            raise BusinessRuleError(f"Cannot generate billings for a {fee.status.value} monthly fee")

        entries = payload.get("units")
        if entries is None:
            entries = self._default_entries(fee)
        if not isinstance(entries, list) or not entries:
            raise ValidationError("units must be a non-empty list")

        rows: list[dict] = []
        seen: set[int] = set()
        for entry in entries:
            if not isinstance(entry, dict):
                raise ValidationError("Each units entry must be an object")
            unit_id = self._unit_in(entry.get("unit_id"), fee.condominium_id)
            if unit_id in seen:
                raise ValidationError(f"Unit {unit_id} appears more than once")
            seen.add(unit_id)

            fraction = to_decimal(entry.get("ideal_fraction"), "ideal_fraction") or Decimal("0")
            additional = _money_field(entry, "additional_charges")
            discounts = _money_field(entry, "discounts")
            amounts = self._calculator.amounts(
                base_value=fee.base_value,
                ideal_fraction=fraction,
                additional_charges=additional,
                discounts=discounts,
            )
            if amounts.total_amount < 0:
                raise ValidationError(f"Total amount for unit {unit_id} would be negative")

            rows.append(
                {
                    "monthly_fee_id": fee.id,
                    "unit_id": unit_id,
                    "ideal_fraction": fraction,
                    "base_amount": amounts.base_amount,
                    "additional_charges": additional,
                    "discounts": discounts,
                    "total_amount": amounts.total_amount,
                    "due_date": fee.due_date,
                    "status": BillingStatus.PENDING,
                    "amount_paid": ZERO,
                    "late_fee": ZERO,
                    "interest": ZERO,
                    "notes": optional_str(entry.get("notes")),
                }
            )

        already = self._billings.billed_unit_ids(monthly_fee_id=fee.id, unit_ids=seen)
        if already:
            raise ConflictError(
                "Some units are already billed for this monthly fee",
                conflicts=[{"unit_id": u} for u in sorted(already)],
            )

        ids = self._billings.create_many(rows=rows)
        logger.info("Generated %d billings for monthly fee %s", len(ids), fee.id)
        return [self.get(i) for i in ids]

    def _clean(self, payload: dict, *, existing: Optional[UnitBilling] = None) -> dict:
        fee = self._fee(payload.get("monthly_fee_id"))
        unit_id = self._unit_in(payload.get("unit_id"), fee.condominium_id)

        if existing is None or (existing.monthly_fee_id, existing.unit_id) != (fee.id, unit_id):
            if self._billings.billed_unit_ids(monthly_fee_id=fee.id, unit_ids=[unit_id]):
                raise ConflictError("This unit is already billed for this monthly fee")

        fraction = to_decimal(payload.get("ideal_fraction"), "ideal_fraction") or Decimal("0")
        additional = _money_field(payload, "additional_charges")
        discounts = _money_field(payload, "discounts")
        computed = self._calculator.amounts(
            base_value=fee.base_value,
            ideal_fraction=fraction,
            additional_charges=additional,
            discounts=discounts,
        )
        base_given = to_decimal(payload.get("base_amount"), "base_amount")
        base_amount = to_money(base_given) if base_given is not None else computed.base_amount
        total_amount = to_money(base_amount + additional - discounts)
        if total_amount < 0:
            raise ValidationError("total_amount cannot be negative")

        return {
            "monthly_fee_id": fee.id,
            "unit_id": unit_id,
            "ideal_fraction": fraction,
            "base_amount": base_amount,
            "additional_charges": additional,
            "discounts": discounts,
            "total_amount": total_amount,
            "barcode": optional_str(payload.get("barcode")),
            "digitable_line": optional_str(payload.get("digitable_line")),
            "our_number": optional_str(payload.get("our_number")),
            "due_date": to_date(payload.get("due_date"), "due_date", required=False) or fee.due_date,
            "status": to_enum(BillingStatus, payload.get("status"), "status", default=BillingStatus.PENDING),
            "payment_date": to_date(payload.get("payment_date"), "payment_date", required=False),
            "amount_paid": _money_field(payload, "amount_paid"),
            "late_fee": _money_field(payload, "late_fee"),
            "interest": _money_field(payload, "interest"),
            "notes": optional_str(payload.get("notes")),
        }

    def get(self, unit_billing_id: int) -> UnitBilling:
        b = self._billings.get(unit_billing_id=require_id(unit_billing_id, "unit_billing_id"))
        if not b:
            raise NotFoundError("Unit billing not found")
        return b

    def list(
        self,
        *,
        monthly_fee_id=None,
        unit_id=None,
        status=None,
        condominium_id=None,
        overdue: bool = False,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[UnitBilling]:
        return self._billings.list(
            monthly_fee_id=optional_id(monthly_fee_id, "monthly_fee_id"),
            unit_id=optional_id(unit_id, "unit_id"),
            status=to_enum(BillingStatus, status, "status") if status else None,
            condominium_id=optional_id(condominium_id, "condominium_id"),
            overdue_on=self.today() if to_bool(overdue) else None,
            limit=limit,
            offset=offset,
        )

    def create(self, payload: dict) -> UnitBilling:
        data = self._clean(payload)
        return self.get(self._billings.create(data=data))

    def update(self, unit_billing_id: int, payload: dict) -> UnitBilling:
        existing = self.get(unit_billing_id)
        payload = payload or {}
        merged = merge_payload(payload, existing)
        if "base_amount" not in payload and ("ideal_fraction" in payload or "monthly_fee_id" in payload):
            # base follows the fee when the fraction or fee changes
            merged.pop("base_amount", None)
        data = self._clean(merged, existing=existing)
        self._billings.update(unit_billing_id=existing.id, data=data)
        return self.get(existing.id)

    def delete(self, unit_billing_id: int) -> None:
        existing = self.get(unit_billing_id)
        self._billings.delete(unit_billing_id=existing.id)

    def refresh_status(self, unit_billing_id: int) -> UnitBilling:
        b = self.get(unit_billing_id)
        status = resolve_status(
            current=b.status,
            total_amount=b.total_amount,
            amount_paid=b.amount_paid,
            due_date=b.due_date,
            today=self.today(),
        )
        if status != b.status:
            self._billings.update(unit_billing_id=b.id, data={"status": status})
            logger.info("Billing %s status %s -> %s", b.id, b.status.value, status.value)
        return self.get(b.id)


class PaymentService:
    def __init__(
        self,
        payments: PaymentRepository,
        billings: UnitBillingRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payments = payments
        self._billings = billings
        self._clock = clock

    def _clean(self, payload: dict) -> dict:
        unit_billing_id = require_id(payload.get("unit_billing_id"), "unit_billing_id")
        if not self._billings.get(unit_billing_id=unit_billing_id):
            raise NotFoundError("Unit billing not found")

        amount = to_decimal(payload.get("amount_paid"), "amount_paid")
        if amount is None or amount <= 0:
            raise ValidationError("amount_paid must be greater than zero")

        return {
            "unit_billing_id": unit_billing_id,
            "payment_date": to_date(payload.get("payment_date"), "payment_date"),
            "amount_paid": to_money(amount),
            "payment_method": to_enum(
                PaymentMethod, payload.get("payment_method"), "payment_method", default=PaymentMethod.BANK_SLIP
            ),
            "reference": optional_str(payload.get("reference")),
            "bank_reference": optional_str(payload.get("bank_reference")),
            "source": to_enum(PaymentSource, payload.get("source"), "source", default=PaymentSource.MANUAL),
            "notes": optional_str(payload.get("notes")),
        }

    def _sync_billing(self, unit_billing_id: int) -> None:
        """Recompute a billing's paid amount, payment date and status from its payments."""
        billing = self._billings.get(unit_billing_id=unit_billing_id)
        if not billing:
            return
        payments = self._payments.list(unit_billing_id=billing.id, limit=ALL_ROWS)
        paid = to_money(sum((p.amount_paid for p in payments), ZERO))
        last_date = max((p.payment_date for p in payments), default=None)
        status = resolve_status(
            current=billing.status,
            total_amount=billing.total_amount,
            amount_paid=paid,
            due_date=billing.due_date,
            today=self._clock().date(),
        )
        self._billings.update(
            unit_billing_id=billing.id,
            data={"amount_paid": paid, "payment_date": last_date, "status": status},
        )

    def get(self, payment_id: int) -> Payment:
        p = self._payments.get(payment_id=require_id(payment_id, "payment_id"))
        if not p:
            raise NotFoundError("Payment not found")
        return p

    def list(
        self,
        *,
        unit_billing_id=None,
        condominium_id=None,
        payment_method=None,
        start_date=None,
        end_date=None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Payment]:
        return self._payments.list(
            unit_billing_id=optional_id(unit_billing_id, "unit_billing_id"),
            condominium_id=optional_id(condominium_id, "condominium_id"),
            payment_method=to_enum(PaymentMethod, payment_method, "payment_method") if payment_method else None,
            start_date=to_date(start_date, "start_date", required=False),
            end_date=to_date(end_date, "end_date", required=False),
            limit=limit,
            offset=offset,
        )

    def create(self, payload: dict) -> Payment:
        data = self._clean(payload)
        new_id = self._payments.create(data=data)
        self._sync_billing(data["unit_billing_id"])
        logger.info(
            "Payment %s recorded: billing=%s amount=%s method=%s",
            new_id,
            data["unit_billing_id"],
            data["amount_paid"],
            data["payment_method"].value,
        )
        return self.get(new_id)

    def update(self, payment_id: int, payload: dict) -> Payment:
        existing = self.get(payment_id)
        data = self._clean(merge_payload(payload, existing))
        self._payments.update(payment_id=existing.id, data=data)
        self._sync_billing(data["unit_billing_id"])
        if data["unit_billing_id"] != existing.unit_billing_id:
            self._sync_billing(existing.unit_billing_id)
        return self.get(existing.id)

    def delete(self, payment_id: int) -> None:
        existing = self.get(payment_id)
        self._payments.delete(payment_id=existing.id)
        self._sync_billing(existing.unit_billing_id)

    def statistics(self, *, start_date, end_date, condominium_id=None) -> dict:
        start = to_date(start_date, "start_date")
        end = to_date(end_date, "end_date")
        if end < start:
            raise ValidationError("end_date must be on or after start_date")

        rows = self._payments.list(
            condominium_id=optional_id(condominium_id, "condominium_id"),
            start_date=start,
            end_date=end,
            limit=ALL_ROWS,
        )
        by_method = {m.value: ZERO for m in PaymentMethod}
        by_source = {s.value: ZERO for s in PaymentSource}
        for p in rows:
            by_method[p.payment_method.value] += p.amount_paid
            by_source[p.source.value] += p.amount_paid

        return {
            "start_date": start,
            "end_date": end,
            "total_payments": len(rows),
            "total_amount": sum((p.amount_paid for p in rows), ZERO),
            "by_method": by_method,
            "by_source": by_source,
        }
