from __future__ import annotations

from datetime import datetime

import pytest

from src.condo_system.condo_system.core.enums import IncidentStatus
from src.condo_system.condo_system.core.exceptions import ValidationError
from src.condo_system.condo_system.incidents.service import IncidentService


def _open(container, condo, **extra):
    payload = {
        "condominium_id": condo.condominium.id,
        "title": "Vazamento na garagem",
        "description": "Agua escorrendo da tubulacao perto da vaga 12.",
        "type": "manutencao",
        "priority": "alta",
        "location": "Garagem G1",
    }
    payload.update(extra)
    return container.incident_service.create(payload)


def test_new_incident_is_open_and_dated_now(container, condo, clock):
    i = _open(container, condo)
    assert i.status == IncidentStatus.OPEN
    assert i.incident_date == clock.now
    assert i.to_dict()["priority_label"] == "Alta"


def test_block_is_taken_from_unit(container, condo):
    unit = condo.units[2]
    i = _open(container, condo, unit_id=unit.id)
    assert i.block_id == unit.block_id


def test_block_from_other_condominium(container, condo):
    other = container.condominium_service.create({"name": "Outro"})
    with pytest.raises(ValidationError):
        _open(container, condo, condominium_id=other.id, block_id=condo.blocks[0].id)


def test_type_is_required(container, condo):
    with pytest.raises(ValidationError):
        _open(container, condo, type=None)


def test_resolving_requires_resolution(container, condo):
    i = _open(container, condo)
    with pytest.raises(ValidationError):
        container.incident_service.update(i.id, {"status": "resolvida"})


def test_resolution_timestamp_lifecycle(container, condo, clock):
    i = _open(container, condo)

    resolved = container.incident_service.update(i.id, {"status": "resolvida", "resolution": "Cano trocado"})
    assert resolved.resolved_at == clock.now

    clock.now = datetime(2025, 3, 11, 10, 0)
    edited = container.incident_service.update(i.id, {"priority": "baixa"})
    assert edited.resolved_at == datetime(2025, 3, 10, 9, 0)

    closed = container.incident_service.update(i.id, {"status": "fechada"})
    assert closed.resolved_at == datetime(2025, 3, 10, 9, 0)

    reopened = container.incident_service.update(i.id, {"status": "aberta"})
    assert reopened.resolved_at is None


def test_stats_counts_recent(container, condo):
    _open(container, condo)
    _open(container, condo, type="ruido", priority="baixa", incident_date="2025-01-02T22:00:00")

    stats = container.incident_service.stats(condo.condominium.id)
    assert stats["total"] == 2
    assert stats["by_type"]["manutencao"] == 1
    assert stats["by_type"]["ruido"] == 1
    assert stats["by_status"]["aberta"] == 2
    assert stats["recent"] == 1


def test_catalogues():
    assert {"value": "seguranca", "label": "Segurança"} in IncidentService.types()
    assert [p["value"] for p in IncidentService.priorities()] == ["baixa", "media", "alta", "urgente"]
    assert len(IncidentService.statuses()) == 4
