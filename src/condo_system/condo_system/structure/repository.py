from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import UnitStatus, UnitType
from .model import Block, Condominium, Unit


class CondominiumRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, condominium_id: int) -> Optional[Condominium]:
        raise NotImplementedError

    def update(self, *, condominium_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, condominium_id: int) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        active_only: bool = False,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Condominium]:
        raise NotImplementedError


class BlockRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, block_id: int) -> Optional[Block]:
        raise NotImplementedError

    def update(self, *, block_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, block_id: int) -> bool:
        raise NotImplementedError

    def list_by_condominium(self, *, condominium_id: int, limit: int = 200, offset: int = 0) -> Sequence[Block]:
        """Ordered by name."""

        raise NotImplementedError


class UnitRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, unit_id: int) -> Optional[Unit]:
        raise NotImplementedError

    def update(self, *, unit_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, unit_id: int) -> bool:
        raise NotImplementedError

    def find_by_number(self, *, condominium_id: int, block_id: Optional[int], number: str) -> Optional[Unit]:
        raise NotImplementedError

    def list_by_condominium(
        self,
        *,
        condominium_id: int,
        block_id: Optional[int] = None,
        status: Optional[UnitStatus] = None,
        unit_type: Optional[UnitType] = None,
        active_only: bool = False,
        limit: int = 1000,
        offset: int = 0,
    ) -> Sequence[Unit]:
        """Ordered by block then number."""

        raise NotImplementedError
