from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AnnouncementPriority, AnnouncementStatus
from .model import Announcement


class AnnouncementRepository(Protocol):
    def create(self, *, data: dict) -> int:
        raise NotImplementedError

    def get(self, *, announcement_id: int) -> Optional[Announcement]:
        raise NotImplementedError

    def update(self, *, announcement_id: int, data: dict) -> bool:
        raise NotImplementedError

    def delete(self, *, announcement_id: int) -> bool:
        raise NotImplementedError

    def list(
        self,
        *,
        condominium_id: int,
        status: Optional[AnnouncementStatus] = None,
        priority: Optional[AnnouncementPriority] = None,
        search: Optional[str] = None,
        current_at: Optional[datetime] = None,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Announcement]:
        """`current_at` keeps only announcements published and not expired at that instant."""
        raise NotImplementedError
