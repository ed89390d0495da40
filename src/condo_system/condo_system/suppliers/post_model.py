from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class SupplierPost:
    """A supplier's advertisement shown to residents."""

    id: int
    supplier_id: int
    title: str
    description: str
    services_offered: Optional[str] = None
    image_path: Optional[str] = None
    price: Optional[Decimal] = None
    contact_info: Optional[str] = None
    instagram: Optional[str] = None
    facebook: Optional[str] = None
    whatsapp: Optional[str] = None
    website: Optional[str] = None
    catalog_url: Optional[str] = None
    is_active: bool = True
    expires_at: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_expired(self, today: date) -> bool:
        # a post stops showing on its expiry day
        return self.expires_at is not None and self.expires_at <= today

    def is_visible(self, today: date) -> bool:
        return self.is_active and not self.is_expired(today)

    def to_dict(self, today: date) -> dict:
        return {**asdict(self), "is_expired": self.is_expired(today)}
