from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import SupplierCategory, SupplierStatus
from .model import Supplier


class SupplierRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, supplier_id: int) -> Optional[Supplier]:
        raise NotImplementedError

    def update(self, *, supplier_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, supplier_id: int) -> bool:
        raise NotImplementedError

    def find_by_document(self, *, cnpj: Optional[str] = None, cpf: Optional[str] = None) -> Optional[Supplier]:
        """Any supplier holding the given CNPJ or CPF."""
        raise NotImplementedError

    def list(
        self,
        *,
        condominium_id: int,
        category: Optional[SupplierCategory] = None,
        status: Optional[SupplierStatus] = None,
        search: Optional[str] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Supplier]:
        raise NotImplementedError
