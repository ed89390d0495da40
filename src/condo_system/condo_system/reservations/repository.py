from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import ReservationStatus
from .model import Reservation, ReservationConfig


class ReservationConfigRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, config_id: int) -> Optional[ReservationConfig]:
        raise NotImplementedError

    def update(self, *, config_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, config_id: int) -> bool:
        raise NotImplementedError

    def get_active_for_space(self, *, space_id: int) -> Optional[ReservationConfig]:
        raise NotImplementedError

    def list_by_condominium(self, *, condominium_id: int, active_only: bool = False) -> Sequence[ReservationConfig]:
        raise NotImplementedError


class ReservationRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, reservation_id: int) -> Optional[Reservation]:
        raise NotImplementedError

    def update(self, *, reservation_id: int, data: dict) -> bool:
        raise NotImplementedError

    def list_for_space_date(
        self,
        *,
        space_id: int,
        reservation_date: date,
        statuses: Iterable[ReservationStatus],
    ) -> Sequence[Reservation]:
        """Ordered by start_time."""

        raise NotImplementedError

    def list(
        self,
        *,
        condominium_id: int,
        status: Optional[ReservationStatus] = None,
        space_id: Optional[int] = None,
        unit_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Reservation]:
        """Ordered by reservation_date desc, start_time desc."""

        raise NotImplementedError

    def count(
        self,
        *,
        condominium_id: int,
        status: Optional[ReservationStatus] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> int:
        """`date_to` is exclusive."""

        raise NotImplementedError
