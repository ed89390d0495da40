from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AnnouncementPriority, AnnouncementStatus, AnnouncementTarget


@dataclass(frozen=True)
class Announcement:
    id: int
    condominium_id: int
    title: str
    content: str
    user_id: Optional[int] = None
    priority: AnnouncementPriority = AnnouncementPriority.NORMAL
    status: AnnouncementStatus = AnnouncementStatus.DRAFT
    target_type: AnnouncementTarget = AnnouncementTarget.ALL
    target_ids: tuple[int, ...] = ()
    published_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    notes: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at < now

    def is_current(self, now: datetime) -> bool:
        """Published, active and not past its expiry."""
        return self.active and self.status == AnnouncementStatus.PUBLISHED and not self.is_expired(now)
