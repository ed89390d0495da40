from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest

from src.condo_system.condo_system.core.enums import UnitStatus
from tests.fakes import FixedClock, make_container

# Monday
NOW = datetime(2025, 3, 10, 9, 0)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def container(clock):
    return make_container(clock)


@pytest.fixture
def condo(container):
    """One condominium with two blocks and four active units."""
    c = container.condominium_service.create({"name": "Residencial Aurora", "city": "Campinas", "state": "sp"})
    block_a = container.block_service.create({"condominium_id": c.id, "name": "Bloco A", "floors": 2})
    block_b = container.block_service.create({"condominium_id": c.id, "name": "Bloco B", "floors": 2})
    units = [
        container.unit_service.create(
            {"condominium_id": c.id, "block_id": block.id, "number": number, "status": UnitStatus.OCCUPIED}
        )
        for block, number in ((block_a, "101"), (block_a, "102"), (block_b, "101"), (block_b, "102"))
    ]
    return SimpleNamespace(condominium=c, blocks=[block_a, block_b], units=units)
