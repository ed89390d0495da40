from __future__ import annotations

from datetime import datetime

import pytest

from src.condo_system.condo_system.core.enums import AnnouncementStatus, AnnouncementTarget
from src.condo_system.condo_system.core.exceptions import BusinessRuleError, ValidationError


def _create(container, condo, **extra):
    payload = {
        "condominium_id": condo.condominium.id,
        "title": "Manutencao do elevador",
        "content": "O elevador do bloco A ficara parado na quinta-feira.",
    }
    payload.update(extra)
    return container.announcement_service.create(payload)


def test_new_announcement_is_a_draft(container, condo):
    a = _create(container, condo, status="published")
    assert a.status == AnnouncementStatus.DRAFT
    assert a.published_at is None
    assert a.target_type == AnnouncementTarget.ALL


def test_targeted_announcement_needs_ids(container, condo):
    with pytest.raises(ValidationError):
        _create(container, condo, target_type="block")

    a = _create(container, condo, target_type="block", target_ids="1, 2,2")
    assert a.target_ids == (1, 2)


def test_expiry_must_be_in_the_future(container, condo):
    with pytest.raises(ValidationError):
        _create(container, condo, expires_at="2025-03-01T00:00:00")


def test_publish_unpublish_archive(container, condo, clock):
    a = _create(container, condo)

    published = container.announcement_service.publish(a.id)
    assert published.status == AnnouncementStatus.PUBLISHED
    assert published.published_at == clock.now

    with pytest.raises(BusinessRuleError):
        container.announcement_service.publish(a.id)

    draft = container.announcement_service.unpublish(a.id)
    assert draft.status == AnnouncementStatus.DRAFT
    assert draft.published_at is None

    with pytest.raises(BusinessRuleError):
        container.announcement_service.unpublish(a.id)

    archived = container.announcement_service.archive(a.id)
    assert archived.status == AnnouncementStatus.ARCHIVED
    with pytest.raises(BusinessRuleError):
        container.announcement_service.archive(a.id)


def test_expired_announcement_cannot_be_published(container, condo, clock):
    a = _create(container, condo, expires_at="2025-03-11T00:00:00")
    clock.now = datetime(2025, 3, 12, 8, 0)
    with pytest.raises(BusinessRuleError):
        container.announcement_service.publish(a.id)


def test_update_keeps_unchanged_past_expiry(container, condo, clock):
    a = _create(container, condo, expires_at="2025-03-11T00:00:00")
    clock.now = datetime(2025, 3, 12, 8, 0)
    updated = container.announcement_service.update(a.id, {"title": "Novo titulo"})
    assert updated.title == "Novo titulo"
    assert updated.expires_at == datetime(2025, 3, 11)


def test_current_listing_and_stats(container, condo, clock):
    live = _create(container, condo, priority="high")
    soon = _create(container, condo, expires_at="2025-03-11T00:00:00")
    _create(container, condo)
    container.announcement_service.publish(live.id)
    container.announcement_service.publish(soon.id)

    cid = condo.condominium.id
    assert {a.id for a in container.announcement_service.list(cid, current=True)} == {live.id, soon.id}

    clock.now = datetime(2025, 3, 12, 8, 0)
    assert [a.id for a in container.announcement_service.list(cid, current=True)] == [live.id]

    stats = container.announcement_service.stats(cid)
    assert stats["total"] == 3
    assert stats["by_status"] == {"draft": 1, "published": 2, "archived": 0}
    assert stats["by_priority"]["high"] == 1
    assert stats["current"] == 1
    assert stats["expired"] == 1
