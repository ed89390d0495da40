from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Resident


class ResidentRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, resident_id: int) -> Optional[Resident]:
        raise NotImplementedError

    def update(self, *, resident_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, resident_id: int) -> bool:
        raise NotImplementedError

    def find_active_for_unit(self, *, unit_id: int) -> Optional[Resident]:
        raise NotImplementedError

    def list_by_condominium(
        self,
        *,
        condominium_id: int,
        search: Optional[str] = None,
        with_tenant: Optional[bool] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Resident]:
        raise NotImplementedError
