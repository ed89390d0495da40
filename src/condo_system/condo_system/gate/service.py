from __future__ import annotations

import logging
import secrets
import string
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, to_date, to_time
from ..common.validators import (
    merge_payload,
    optional_id,
    optional_str,
    require_id,
    require_max_length,
    require_non_empty,
    to_bool,
    to_enum,
)
from ..core.constants import ALL_ROWS, DELIVERY_CODE_LENGTH
from ..core.enums import DeliveryStatus, DeliveryType, DocumentType, VisitorStatus, VisitorType
from ..core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from ..structure.repository import CondominiumRepository, UnitRepository
from .model import Delivery, Visitor
from .repository import DeliveryRepository, VisitorRepository

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_CODE_ATTEMPTS = 20


def generate_delivery_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(DELIVERY_CODE_LENGTH))


def _normalize_code(value) -> str:
    code = require_non_empty(value, "code").upper()
    if len(code) != DELIVERY_CODE_LENGTH or any(c not in CODE_ALPHABET for c in code):
        raise ValidationError(f"code must be {DELIVERY_CODE_LENGTH} letters or digits")
    return code


class DeliveryService:
    def __init__(
        self,
        deliveries: DeliveryRepository,
        units: UnitRepository,
        *,
        clock: Callable[[], datetime] = now_local,
        code_factory: Callable[[], str] = generate_delivery_code,
    ):
        self._deliveries = deliveries
        self._units = units
        self._clock = clock
        self._code_factory = code_factory

    def _clean(self, payload: dict) -> dict:
        unit_id = require_id(payload.get("unit_id"), "unit_id")
        if not self._units.get(unit_id=unit_id):
            raise NotFoundError("Unit not found")
        return {
            "unit_id": unit_id,
            "recipient_name": require_max_length(
                require_non_empty(payload.get("recipient_name"), "recipient_name"), "recipient_name", 255
            ),
            "type": to_enum(DeliveryType, payload.get("type"), "type"),
            "sender": require_max_length(optional_str(payload.get("sender")), "sender", 255),
            "description": optional_str(payload.get("description")),
            "notes": optional_str(payload.get("notes")),
        }

    def _new_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = self._code_factory()
            if not self._deliveries.find_by_code(code=code):
                return code
        raise BusinessRuleError("Could not generate a unique delivery code")

    def _ensure_pending(self, delivery: Delivery, action: str) -> None:
        if delivery.status != DeliveryStatus.PENDING:
            raise BusinessRuleError(f"Cannot {action} a delivery that was already collected")

    def get(self, delivery_id: int) -> Delivery:
        d = self._deliveries.get(delivery_id=require_id(delivery_id, "delivery_id"))
        if not d:
            raise NotFoundError("Delivery not found")
        return d

    def list(
        self,
        *,
        condominium_id=None,
        unit_id=None,
        status=None,
        delivery_type=None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Delivery]:
        return self._deliveries.list(
            condominium_id=optional_id(condominium_id, "condominium_id"),
            unit_id=optional_id(unit_id, "unit_id"),
            status=to_enum(DeliveryStatus, status, "status") if status else None,
            delivery_type=to_enum(DeliveryType, delivery_type, "type") if delivery_type else None,
            search=optional_str(search),
            limit=limit,
            offset=offset,
        )

    def create(self, payload: dict) -> Delivery:
        data = self._clean(payload)
        data.update(
            {
                "delivery_code": self._new_code(),
                "status": DeliveryStatus.PENDING,
                "received_by": optional_id(payload.get("received_by"), "received_by"),
                "received_at": self._clock(),
            }
        )
        new_id = self._deliveries.create(data=data)
        logger.info("Delivery %s received for unit %s (code %s)", new_id, data["unit_id"], data["delivery_code"])
        return self.get(new_id)

    def update(self, delivery_id: int, payload: dict) -> Delivery:
        existing = self.get(delivery_id)
        self._ensure_pending(existing, "update")
        data = self._clean(merge_payload(payload, existing))
        self._deliveries.update(delivery_id=existing.id, data=data)
        return self.get(existing.id)

    def delete(self, delivery_id: int) -> None:
        existing = self.get(delivery_id)
        self._ensure_pending(existing, "delete")
        self._deliveries.delete(delivery_id=existing.id)

    def find_by_code(self, code) -> Delivery:
        d = self._deliveries.find_by_code(code=_normalize_code(code))
        if not d:
            raise NotFoundError("Delivery code not found")
        return d

    def collect(self, delivery_id: int, payload: Optional[dict] = None) -> Delivery:
        payload = payload or {}
        d = self.get(delivery_id)
        code = payload.get("delivery_code")
        if code and _normalize_code(code) != d.delivery_code:
            raise BusinessRuleError("Invalid delivery code")
        self._ensure_pending(d, "collect")

        data: dict = {
            "status": DeliveryStatus.COLLECTED,
            "delivered_to": optional_id(payload.get("delivered_to"), "delivered_to"),
            "collected_at": self._clock(),
        }
        notes = optional_str(payload.get("notes"))
        if notes:
            data["notes"] = notes
        self._deliveries.update(delivery_id=d.id, data=data)
        logger.info("Delivery %s collected", d.id)
        return self.get(d.id)

    def stats(self, *, condominium_id=None) -> dict:
        rows = self.list(condominium_id=condominium_id, limit=ALL_ROWS)
        today = self._clock().date()
        return {
            "total": len(rows),
            "pending": sum(1 for d in rows if d.status == DeliveryStatus.PENDING),
            "collected": sum(1 for d in rows if d.status == DeliveryStatus.COLLECTED),
            "received_today": sum(1 for d in rows if d.received_at and d.received_at.date() == today),
            "collected_today": sum(1 for d in rows if d.collected_at and d.collected_at.date() == today),
        }


class VisitorService:
    """Visitor registration and the gate flow from validation to check-out."""

    def __init__(
        self,
        visitors: VisitorRepository,
        condominiums: CondominiumRepository,
        units: UnitRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._visitors = visitors
        self._condominiums = condominiums
        self._units = units
        self._clock = clock

    def _clean(self, payload: dict) -> dict:
        condominium_id = require_id(payload.get("condominium_id"), "condominium_id")
        if not self._condominiums.get(condominium_id=condominium_id):
            raise NotFoundError("Condominium not found")

        unit_id = optional_id(payload.get("unit_id"), "unit_id")
        if unit_id is not None:
            unit = self._units.get(unit_id=unit_id)
            if not unit or unit.condominium_id != condominium_id:
                raise ValidationError("Unit does not belong to this condominium")

        plate = optional_str(payload.get("vehicle_plate"))
        return {
            "condominium_id": condominium_id,
            "unit_id": unit_id,
            "resident_id": optional_id(payload.get("resident_id"), "resident_id"),
            "name": require_max_length(require_non_empty(payload.get("name"), "name"), "name", 255),
            "document_type": to_enum(DocumentType, payload.get("document_type"), "document_type"),
            "document_number": require_max_length(
                optional_str(payload.get("document_number")), "document_number", 50
            ),
            "phone": require_max_length(optional_str(payload.get("phone")), "phone", 20),
            "vehicle_plate": require_max_length(plate.upper() if plate else None, "vehicle_plate", 10),
            "vehicle_model": require_max_length(optional_str(payload.get("vehicle_model")), "vehicle_model", 100),
            "vehicle_color": require_max_length(optional_str(payload.get("vehicle_color")), "vehicle_color", 50),
            "visitor_type": to_enum(VisitorType, payload.get("visitor_type"), "visitor_type"),
            "purpose": require_max_length(optional_str(payload.get("purpose")), "purpose", 255),
            "scheduled_date": to_date(payload.get("scheduled_date"), "scheduled_date", required=False),
            "scheduled_time": to_time(payload.get("scheduled_time"), "scheduled_time", required=False),
            "notes": optional_str(payload.get("notes")),
            "authorized_by": optional_str(payload.get("authorized_by")),
            "active": to_bool(payload.get("active"), default=True),
        }

    def _transition(self, visitor: Visitor, data: dict) -> Visitor:
        self._visitors.update(visitor_id=visitor.id, data=data)
        logger.info("Visitor %s: %s -> %s", visitor.id, visitor.status.value, data["status"].value)
        return self.get(visitor.id)

    def get(self, visitor_id: int) -> Visitor:
        v = self._visitors.get(visitor_id=require_id(visitor_id, "visitor_id"))
        if not v:
            raise NotFoundError("Visitor not found")
        return v

    def list(
        self,
        condominium_id: int,
        *,
        status=None,
        visitor_type=None,
        unit_id=None,
        scheduled_date=None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Visitor]:
        return self._visitors.list(
            condominium_id=require_id(condominium_id, "condominium_id"),
            status=to_enum(VisitorStatus, status, "status") if status else None,
            visitor_type=to_enum(VisitorType, visitor_type, "visitor_type") if visitor_type else None,
            unit_id=optional_id(unit_id, "unit_id"),
            scheduled_date=to_date(scheduled_date, "date", required=False),
            search=optional_str(search),
            limit=limit,
            offset=offset,
        )

    def register(self, payload: dict) -> Visitor:
        data = self._clean(payload)
        data["status"] = VisitorStatus.PENDING
        new_id = self._visitors.create(data=data)
        logger.info("Visitor %s registered, awaiting validation", new_id)
        return self.get(new_id)

    def update(self, visitor_id: int, payload: dict) -> Visitor:
        existing = self.get(visitor_id)
        # status only moves through the gate actions
        data = self._clean(merge_payload(payload, existing))
        self._visitors.update(visitor_id=existing.id, data=data)
        return self.get(existing.id)

    def delete(self, visitor_id: int) -> None:
        existing = self.get(visitor_id)
        self._visitors.delete(visitor_id=existing.id)

    def validate(self, visitor_id: int, payload: dict) -> Visitor:
        payload = payload or {}
        v = self.get(visitor_id)
        action = require_non_empty(payload.get("action"), "action").lower()
        if action not in ("approve", "reject"):
            raise ValidationError("action must be one of: approve, reject")
        if v.status != VisitorStatus.PENDING:
            raise BusinessRuleError(f"Only pending visitors can be validated (current status: {v.status.value})")

        data: dict = {
            "status": VisitorStatus.SCHEDULED if action == "approve" else VisitorStatus.REJECTED,
            "validated_by": optional_id(payload.get("validated_by"), "validated_by"),
            "validated_at": self._clock(),
        }
        if "notes" in payload:
            data["notes"] = optional_str(payload.get("notes"))
        return self._transition(v, data)

    def check_in(self, visitor_id: int) -> Visitor:
        v = self.get(visitor_id)
        if not v.can_check_in():
            raise BusinessRuleError(f"Visitor cannot check in (current status: {v.status.value})")
        return self._transition(v, {"status": VisitorStatus.CHECKED_IN, "entry_at": self._clock()})

    def check_out(self, visitor_id: int) -> Visitor:
        v = self.get(visitor_id)
        if not v.can_check_out():
            raise BusinessRuleError(f"Visitor cannot check out (current status: {v.status.value})")
        return self._transition(v, {"status": VisitorStatus.CHECKED_OUT, "exit_at": self._clock()})

    def cancel(self, visitor_id: int) -> Visitor:
        v = self.get(visitor_id)
        if not v.can_be_cancelled():
            raise BusinessRuleError(f"Visitor cannot be cancelled (current status: {v.status.value})")
        return self._transition(v, {"status": VisitorStatus.CANCELLED})
