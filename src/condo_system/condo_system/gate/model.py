from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import DeliveryStatus, DeliveryType, DocumentType, VisitorStatus, VisitorType


@dataclass(frozen=True)
class Delivery:
    id: int
    unit_id: int
    recipient_name: str
    delivery_code: str
    type: DeliveryType = DeliveryType.PACKAGE
    sender: Optional[str] = None
    description: Optional[str] = None
    status: DeliveryStatus = DeliveryStatus.PENDING
    received_by: Optional[int] = None
    received_at: Optional[datetime] = None
    delivered_to: Optional[int] = None
    collected_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Visitor:
    id: int
    condominium_id: int
    name: str
    document_type: DocumentType = DocumentType.RG
    document_number: Optional[str] = None
    phone: Optional[str] = None
    unit_id: Optional[int] = None
    resident_id: Optional[int] = None
    vehicle_plate: Optional[str] = None
    vehicle_model: Optional[str] = None
    vehicle_color: Optional[str] = None
    visitor_type: VisitorType = VisitorType.PERSONAL
    purpose: Optional[str] = None
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[time] = None
    entry_at: Optional[datetime] = None
    exit_at: Optional[datetime] = None
    status: VisitorStatus = VisitorStatus.PENDING
    notes: Optional[str] = None
    authorized_by: Optional[str] = None
    validated_by: Optional[int] = None
    validated_at: Optional[datetime] = None
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def can_check_in(self) -> bool:
        return self.status == VisitorStatus.SCHEDULED

    def can_check_out(self) -> bool:
        return self.status == VisitorStatus.CHECKED_IN

    def can_be_cancelled(self) -> bool:
        return self.status in (VisitorStatus.PENDING, VisitorStatus.SCHEDULED)
