from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import SpaceStatus, SpaceType
from .model import Space


class SpaceRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, space_id: int) -> Optional[Space]:
        raise NotImplementedError

    def update(self, *, space_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, space_id: int) -> bool:
        raise NotImplementedError

    def find_by_number(self, *, condominium_id: int, number: str) -> Optional[Space]:
        raise NotImplementedError

    def list_by_condominium(
        self,
        *,
        condominium_id: int,
        space_type: Optional[SpaceType] = None,
        status: Optional[SpaceStatus] = None,
        reservable: Optional[bool] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Space]:
        raise NotImplementedError
