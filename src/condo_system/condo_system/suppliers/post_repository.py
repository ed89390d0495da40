from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .post_model import SupplierPost


class SupplierPostRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, post_id: int) -> Optional[SupplierPost]:
        raise NotImplementedError

    def update(self, *, post_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, post_id: int) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        supplier_id: Optional[int] = None,
        condominium_id: Optional[int] = None,
        search: Optional[str] = None,
        visible_on: Optional[date] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[SupplierPost]:
        """Newest first. `visible_on` keeps active posts not expired on that day."""
        raise NotImplementedError
