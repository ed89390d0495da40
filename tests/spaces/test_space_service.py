from __future__ import annotations

import pytest

from src.condo_system.condo_system.core.enums import SpaceStatus, SpaceType
from src.condo_system.condo_system.core.exceptions import ConflictError, ValidationError


def test_space_defaults(container, condo):
    s = container.space_service.create({"condominium_id": condo.condominium.id, "number": "D-01"})
    assert s.space_type == SpaceType.STORAGE
    assert s.status == SpaceStatus.AVAILABLE
    assert s.reservable is False
    assert s.can_be_reserved is False


def test_space_number_unique_in_condominium(container, condo):
    container.space_service.create({"condominium_id": condo.condominium.id, "number": "D-01"})
    with pytest.raises(ConflictError):
        container.space_service.create({"condominium_id": condo.condominium.id, "number": "D-01"})


def test_space_unit_must_belong_to_condominium(container, condo):
    other = container.condominium_service.create({"name": "Outro"})
    with pytest.raises(ValidationError):
        container.space_service.create(
            {"condominium_id": other.id, "number": "D-01", "unit_id": condo.units[0].id}
        )


def test_space_under_maintenance_cannot_be_reserved(container, condo):
    s = container.space_service.create(
        {
            "condominium_id": condo.condominium.id,
            "number": "SF",
            "space_type": "party_hall",
            "reservable": True,
            "status": "maintenance",
        }
    )
    assert s.can_be_reserved is False
    assert s.to_dict()["type_name"] == "Salão de Festas"


def test_list_filters_reservable(container, condo):
    cid = condo.condominium.id
    container.space_service.create({"condominium_id": cid, "number": "A", "reservable": True})
    container.space_service.create({"condominium_id": cid, "number": "B"})

    reservable = container.space_service.list_by_condominium(cid, reservable=True)
    assert [s.number for s in reservable] == ["A"]


def test_unknown_space_type_is_rejected(container, condo):
    with pytest.raises(ValidationError):
        container.space_service.create({"condominium_id": condo.condominium.id, "number": "X", "space_type": "pool"})
