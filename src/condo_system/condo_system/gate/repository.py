from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import DeliveryStatus, DeliveryType, VisitorStatus, VisitorType
from .model import Delivery, Visitor


class DeliveryRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, delivery_id: int) -> Optional[Delivery]:
        raise NotImplementedError

    def update(self, *, delivery_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, delivery_id: int) -> bool:
        raise NotImplementedError

    def find_by_code(self, *, code: str) -> Optional[Delivery]:
        raise NotImplementedError

    def list(
        self,
        *,
        condominium_id: Optional[int] = None,
        unit_id: Optional[int] = None,
        status: Optional[DeliveryStatus] = None,
        delivery_type: Optional[DeliveryType] = None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Delivery]:
        raise NotImplementedError


class VisitorRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, visitor_id: int) -> Optional[Visitor]:
        raise NotImplementedError

    def update(self, *, visitor_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, visitor_id: int) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        condominium_id: int,
        status: Optional[VisitorStatus] = None,
        visitor_type: Optional[VisitorType] = None,
        unit_id: Optional[int] = None,
        scheduled_date: Optional[date] = None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Visitor]:
        raise NotImplementedError
