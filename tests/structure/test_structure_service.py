from __future__ import annotations

import pytest

from src.condo_system.condo_system.core.exceptions import ConflictError, NotFoundError, ValidationError


def test_condominium_state_is_uppercased(container):
    c = container.condominium_service.create({"name": "  Edificio Sol ", "state": "rj"})
    assert c.name == "Edificio Sol"
    assert c.state == "RJ"
    assert c.active is True


def test_condominium_requires_name(container):
    with pytest.raises(ValidationError):
        container.condominium_service.create({"city": "Santos"})


def test_unit_number_is_unique_per_block(container, condo):
    block = condo.blocks[0]
    with pytest.raises(ConflictError):
        container.unit_service.create(
            {"condominium_id": condo.condominium.id, "block_id": block.id, "number": "101"}
        )


def test_same_number_allowed_in_another_block(container, condo):
    # "101" exists in both blocks of the fixture
    numbers = [(u.block_id, u.number) for u in condo.units]
    assert (condo.blocks[0].id, "101") in numbers
    assert (condo.blocks[1].id, "101") in numbers


def test_unit_block_must_belong_to_condominium(container, condo):
    other = container.condominium_service.create({"name": "Outro"})
    with pytest.raises(ValidationError):
        container.unit_service.create({"condominium_id": other.id, "block_id": condo.blocks[0].id, "number": "1"})


def test_unit_update_keeps_its_own_number(container, condo):
    unit = condo.units[0]
    updated = container.unit_service.update(unit.id, {"bedrooms": 3})
    assert updated.number == unit.number
    assert updated.bedrooms == 3


def test_complete_structure_groups_units_by_block(container, condo):
    loose = container.unit_service.create({"condominium_id": condo.condominium.id, "number": "Loja 1"})

    tree = container.condominium_service.complete_structure(condo.condominium.id)

    assert [b["name"] for b in tree["blocks"]] == ["Bloco A", "Bloco B"]
    assert [u.number for u in tree["blocks"][0]["units"]] == ["101", "102"]
    assert [u.id for u in tree["units_without_block"]] == [loose.id]


def test_block_stats(container, condo):
    stats = container.block_service.stats(condo.condominium.id)
    assert stats == {"total_blocks": 2, "active_blocks": 2, "total_units": 4}


def test_missing_unit_raises_not_found(container):
    with pytest.raises(NotFoundError):
        container.unit_service.get(999)
