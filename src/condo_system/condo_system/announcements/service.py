from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, to_datetime
from ..common.validators import (
    merge_payload,
    optional_id,
    optional_str,
    require_id,
    require_max_length,
    require_non_empty,
    to_bool,
    to_enum,
)
from ..core.constants import ALL_ROWS
from ..core.enums import AnnouncementPriority, AnnouncementStatus, AnnouncementTarget
from ..core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from ..structure.repository import CondominiumRepository
from .model import Announcement
from .repository import AnnouncementRepository

logger = logging.getLogger(__name__)


def _target_ids(value) -> tuple[int, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, (int, str)):
        value = [v for v in str(value).split(",") if v.strip()]
    ids: list[int] = []
    for raw in value:
        i = require_id(raw, "target_ids")
        if i not in ids:
            ids.append(i)
    return tuple(ids)


class AnnouncementService:
    def __init__(
        self,
        announcements: AnnouncementRepository,
        condominiums: CondominiumRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._announcements = announcements
        self._condominiums = condominiums
        self._clock = clock

    def _clean(self, payload: dict, *, existing: Optional[Announcement] = None) -> dict:
        condominium_id = require_id(payload.get("condominium_id"), "condominium_id")
        if not self._condominiums.get(condominium_id=condominium_id):
            raise NotFoundError("Condominium not found")

        target_type = to_enum(
            AnnouncementTarget, payload.get("target_type"), "target_type", default=AnnouncementTarget.ALL
        )
        target_ids = _target_ids(payload.get("target_ids"))
        if target_type == AnnouncementTarget.ALL:
            target_ids = ()
        elif not target_ids:
            raise ValidationError(f"target_ids is required when target_type is {target_type.value}")

        expires_at = to_datetime(payload.get("expires_at"), "expires_at", required=False)
        unchanged = existing is not None and expires_at == existing.expires_at
        if expires_at is not None and not unchanged and expires_at <= self._clock():
            raise ValidationError("expires_at must be in the future")

        status = to_enum(AnnouncementStatus, payload.get("status"), "status", default=AnnouncementStatus.DRAFT)
        published_at = to_datetime(payload.get("published_at"), "published_at", required=False)
        if status == AnnouncementStatus.PUBLISHED and published_at is None:
            published_at = self._clock()
        elif status == AnnouncementStatus.DRAFT:
            published_at = None

        return {
            "condominium_id": condominium_id,
            "user_id": optional_id(payload.get("user_id"), "user_id"),
            "title": require_max_length(require_non_empty(payload.get("title"), "title"), "title", 255),
            "content": require_non_empty(payload.get("content"), "content"),
            "priority": to_enum(
                AnnouncementPriority, payload.get("priority"), "priority", default=AnnouncementPriority.NORMAL
            ),
            "status": status,
            "target_type": target_type,
            "target_ids": target_ids,
            "published_at": published_at,
            "expires_at": expires_at,
            "notes": optional_str(payload.get("notes")),
            "active": to_bool(payload.get("active"), default=True),
        }

    def get(self, announcement_id: int) -> Announcement:
        a = self._announcements.get(announcement_id=require_id(announcement_id, "announcement_id"))
        if not a:
            raise NotFoundError("Announcement not found")
        return a

    def list(
        self,
        condominium_id: int,
        *,
        status=None,
        priority=None,
        search: Optional[str] = None,
        current: bool = False,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[Announcement]:
        return self._announcements.list(
            condominium_id=require_id(condominium_id, "condominium_id"),
            status=to_enum(AnnouncementStatus, status, "status") if status else None,
            priority=to_enum(AnnouncementPriority, priority, "priority") if priority else None,
            search=optional_str(search),
            current_at=self._clock() if current else None,
            limit=limit,
            offset=offset,
        )

    def create(self, payload: dict) -> Announcement:
        # new announcements always start as drafts
        data = self._clean({**(payload or {}), "status": AnnouncementStatus.DRAFT})
        return self.get(self._announcements.create(data=data))

    def update(self, announcement_id: int, payload: dict) -> Announcement:
        existing = self.get(announcement_id)
        data = self._clean(merge_payload(payload, existing), existing=existing)
        self._announcements.update(announcement_id=existing.id, data=data)
        return self.get(existing.id)

    def delete(self, announcement_id: int) -> None:
        existing = self.get(announcement_id)
        self._announcements.delete(announcement_id=existing.id)

    def publish(self, announcement_id: int) -> Announcement:
        a = self.get(announcement_id)
        if a.status == AnnouncementStatus.PUBLISHED:
            raise BusinessRuleError("Announcement is already published")
        if a.is_expired(self._clock()):
            raise BusinessRuleError("Announcement has already expired")
        self._announcements.update(
            announcement_id=a.id,
            data={"status": AnnouncementStatus.PUBLISHED, "published_at": self._clock()},
        )
        logger.info("Announcement %s published", a.id)
        return self.get(a.id)

    def unpublish(self, announcement_id: int) -> Announcement:
        a = self.get(announcement_id)
        if a.status != AnnouncementStatus.PUBLISHED:
            raise BusinessRuleError("Only published announcements can be unpublished")
        self._announcements.update(
            announcement_id=a.id,
            data={"status": AnnouncementStatus.DRAFT, "published_at": None},
        )
        return self.get(a.id)

    def archive(self, announcement_id: int) -> Announcement:
        a = self.get(announcement_id)
        if a.status == AnnouncementStatus.ARCHIVED:
            raise BusinessRuleError("Announcement is already archived")
        self._announcements.update(announcement_id=a.id, data={"status": AnnouncementStatus.ARCHIVED})
        return self.get(a.id)

    def stats(self, condominium_id: int) -> dict:
        rows = self.list(condominium_id, limit=ALL_ROWS)
        now = self._clock()
        return {
            "total": len(rows),
            "by_status": {s.value: sum(1 for a in rows if a.status == s) for s in AnnouncementStatus},
            "by_priority": {p.value: sum(1 for a in rows if a.priority == p) for p in AnnouncementPriority},
            "current": sum(1 for a in rows if a.is_current(now)),
            "expired": sum(1 for a in rows if a.is_expired(now)),
        }
