from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, to_date
from ..common.validators import (
    digits_only,
    merge_payload,
    optional_email,
    optional_str,
    require_id,
    require_max_length,
    require_non_empty,
    to_decimal,
    to_enum,
)
from ..core.constants import ALL_ROWS, EXPIRING_CONTRACT_DAYS
from ..core.enums import SupplierCategory, SupplierStatus, SupplierType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..structure.repository import CondominiumRepository
from .model import SUPPLIER_CATEGORY_LABELS, SUPPLIER_TYPE_LABELS, Supplier
from .repository import SupplierRepository

logger = logging.getLogger(__name__)

CNPJ_DIGITS = 14
CPF_DIGITS = 11
EVALUATION_STEP = Decimal("0.1")


def _evaluation(value) -> Optional[Decimal]:
    v = to_decimal(value, "evaluation")
    if v is None:
        return None
    if not Decimal("1") <= v <= Decimal("5"):
        raise ValidationError("evaluation must be between 1 and 5")
    return v.quantize(EVALUATION_STEP)


def _document(value, field_name: str, digits: int) -> Optional[str]:
    doc = digits_only(optional_str(value))
    if doc is not None and len(doc) != digits:
        raise ValidationError(f"{field_name} must have {digits} digits")
    return doc


class SupplierService:
    def __init__(
        self,
        suppliers: SupplierRepository,
        condominiums: CondominiumRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._suppliers = suppliers
        self._condominiums = condominiums
        self._clock = clock

    def _check_document(self, *, supplier_id: Optional[int], **document) -> None:
        clash = self._suppliers.find_by_document(**document)
        if clash and clash.id != supplier_id:
            field_name = next(iter(document))
            raise ConflictError(f"Another supplier already uses this {field_name.upper()}")

    def _clean(self, payload: dict, *, supplier_id: Optional[int] = None) -> dict:
        condominium_id = require_id(payload.get("condominium_id"), "condominium_id")
        if not self._condominiums.get(condominium_id=condominium_id):
            raise NotFoundError("Condominium not found")

        supplier_type = to_enum(SupplierType, payload.get("supplier_type"), "supplier_type", default=SupplierType.COMPANY)
        cnpj = _document(payload.get("cnpj"), "cnpj", CNPJ_DIGITS)
        cpf = _document(payload.get("cpf"), "cpf", CPF_DIGITS)
        if supplier_type == SupplierType.COMPANY and not cnpj:
            raise ValidationError("cnpj is required for company suppliers")
        if supplier_type != SupplierType.COMPANY and not cpf:
            raise ValidationError(f"cpf is required for {supplier_type.value} suppliers")
        if cnpj:
            self._check_document(supplier_id=supplier_id, cnpj=cnpj)
        if cpf:
            self._check_document(supplier_id=supplier_id, cpf=cpf)

        contract_start = to_date(payload.get("contract_start"), "contract_start", required=False)
        contract_end = to_date(payload.get("contract_end"), "contract_end", required=False)
        if contract_start and contract_end and contract_end < contract_start:
            raise ValidationError("contract_end cannot be before contract_start")

        state = optional_str(payload.get("state"))
        if state is not None and len(state) != 2:
            raise ValidationError("state must be the 2-letter abbreviation")

        return {
            "condominium_id": condominium_id,
            "company_name": require_max_length(
                require_non_empty(payload.get("company_name"), "company_name"), "company_name", 255
            ),
            "trade_name": require_max_length(optional_str(payload.get("trade_name")), "trade_name", 255),
            "cnpj": cnpj,
            "cpf": cpf,
            "supplier_type": supplier_type,
            "category": to_enum(SupplierCategory, payload.get("category"), "category", default=SupplierCategory.OTHER),
            "contact_name": require_max_length(
                require_non_empty(payload.get("contact_name"), "contact_name"), "contact_name", 255
            ),
            "email": optional_email(payload.get("email")),
            "phone": require_max_length(optional_str(payload.get("phone")), "phone", 20),
            "mobile": require_max_length(optional_str(payload.get("mobile")), "mobile", 20),
            "address": optional_str(payload.get("address")),
            "number": require_max_length(optional_str(payload.get("number")), "number", 20),
            "district": optional_str(payload.get("district")),
            "city": optional_str(payload.get("city")),
            "state": state.upper() if state else None,
            "zip_code": digits_only(optional_str(payload.get("zip_code"))),
            "services_description": optional_str(payload.get("services_description")),
            "hourly_rate": to_decimal(payload.get("hourly_rate"), "hourly_rate"),
            "monthly_rate": to_decimal(payload.get("monthly_rate"), "monthly_rate"),
            "contract_start": contract_start,
            "contract_end": contract_end,
            "status": to_enum(SupplierStatus, payload.get("status"), "status", default=SupplierStatus.ACTIVE),
            "evaluation": _evaluation(payload.get("evaluation")),
            "emergency_contact": optional_str(payload.get("emergency_contact")),
            "notes": optional_str(payload.get("notes")),
        }

    def today(self) -> date:
        return self._clock().date()

    def get(self, supplier_id: int) -> Supplier:
        s = self._suppliers.get(supplier_id=require_id(supplier_id, "supplier_id"))
        if not s:
            raise NotFoundError("Supplier not found")
        return s

    def list(
        self,
        condominium_id: int,
        *,
        category=None,
        status=None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Supplier]:
        return self._suppliers.list(
            condominium_id=require_id(condominium_id, "condominium_id"),
            category=to_enum(SupplierCategory, category, "category") if category else None,
            status=to_enum(SupplierStatus, status, "status") if status else None,
            search=optional_str(search),
            limit=limit,
            offset=offset,
        )

    def create(self, payload: dict) -> Supplier:
        data = self._clean(payload)
        new_id = self._suppliers.create(data=data)
        logger.info("Supplier %s registered (%s)", new_id, data["category"].value)
        return self.get(new_id)

    def update(self, supplier_id: int, payload: dict) -> Supplier:
        existing = self.get(supplier_id)
        data = self._clean(merge_payload(payload, existing), supplier_id=existing.id)
        self._suppliers.update(supplier_id=existing.id, data=data)
        return self.get(existing.id)

    def delete(self, supplier_id: int) -> None:
        existing = self.get(supplier_id)
        self._suppliers.delete(supplier_id=existing.id)

    def evaluate(self, supplier_id: int, rating) -> Supplier:
        s = self.get(supplier_id)
        if rating is None or rating == "":
            raise ValidationError("evaluation is required")
        self._suppliers.update(supplier_id=s.id, data={"evaluation": _evaluation(rating)})
        return self.get(s.id)

    def stats(self, condominium_id: int) -> dict:
        rows = self.list(condominium_id, limit=ALL_ROWS)
        today = self.today()
        rated = [s.evaluation for s in rows if s.evaluation]
        average = (sum(rated) / len(rated)).quantize(Decimal("0.01")) if rated else Decimal("0")
        return {
            "total": len(rows),
            "by_status": {st.value: sum(1 for s in rows if s.status == st) for st in SupplierStatus},
            "by_category": {c.value: sum(1 for s in rows if s.category == c) for c in SupplierCategory},
            "contracts_expiring": sum(1 for s in rows if s.contract_expiring(today, EXPIRING_CONTRACT_DAYS)),
            "average_evaluation": average,
        }

    @staticmethod
    def categories() -> list[dict]:
        return [{"value": c.value, "label": label} for c, label in SUPPLIER_CATEGORY_LABELS.items()]

    @staticmethod
    def types() -> list[dict]:
        return [{"value": t.value, "label": label} for t, label in SUPPLIER_TYPE_LABELS.items()]
