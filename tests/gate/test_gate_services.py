from __future__ import annotations

from datetime import datetime

import pytest

from src.condo_system.condo_system.core.constants import DELIVERY_CODE_LENGTH
from src.condo_system.condo_system.core.enums import DeliveryStatus, VisitorStatus
from src.condo_system.condo_system.core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from src.condo_system.condo_system.gate.service import CODE_ALPHABET, DeliveryService, generate_delivery_code


def _receive(container, condo, **extra):
    payload = {"unit_id": condo.units[0].id, "recipient_name": "Marta Reis", "type": "package", "sender": "Loja X"}
    payload.update(extra)
    return container.delivery_service.create(payload)


def _visitor(container, condo, **extra):
    payload = {
        "condominium_id": condo.condominium.id,
        "unit_id": condo.units[1].id,
        "name": "Roberto Alves",
        "document_type": "cpf",
        "document_number": "11122233344",
        "visitor_type": "service",
        "vehicle_plate": "abc1d23",
        "scheduled_date": "2025-03-11",
    }
    payload.update(extra)
    return container.visitor_service.register(payload)


def test_generated_codes_use_the_alphabet():
    code = generate_delivery_code()
    assert len(code) == DELIVERY_CODE_LENGTH
    assert all(c in CODE_ALPHABET for c in code)


def test_delivery_is_received_pending_with_code(container, condo, clock):
    d = _receive(container, condo)
    assert d.status == DeliveryStatus.PENDING
    assert d.received_at == clock.now
    assert len(d.delivery_code) == DELIVERY_CODE_LENGTH


def test_code_generation_retries_on_collision(container, condo):
    codes = iter(["AAAA1111", "AAAA1111", "BBBB2222"])
    service = DeliveryService(container.deliveries_repo, container.units_repo, code_factory=lambda: next(codes))
    first = service.create({"unit_id": condo.units[0].id, "recipient_name": "A", "type": "letter"})
    second = service.create({"unit_id": condo.units[0].id, "recipient_name": "B", "type": "letter"})
    assert first.delivery_code == "AAAA1111"
    assert second.delivery_code == "BBBB2222"


def test_code_generation_gives_up(container, condo):
    service = DeliveryService(container.deliveries_repo, container.units_repo, code_factory=lambda: "SAMECODE")
    service.create({"unit_id": condo.units[0].id, "recipient_name": "A", "type": "letter"})
    with pytest.raises(BusinessRuleError):
        service.create({"unit_id": condo.units[0].id, "recipient_name": "B", "type": "letter"})


def test_find_by_code_is_case_insensitive(container, condo):
    d = _receive(container, condo)
    assert container.delivery_service.find_by_code(d.delivery_code.lower()).id == d.id

    with pytest.raises(ValidationError):
        container.delivery_service.find_by_code("short")
    with pytest.raises(NotFoundError):
        container.delivery_service.find_by_code("ZZZZ9999" if d.delivery_code != "ZZZZ9999" else "YYYY9999")


def test_collect_checks_code_and_locks_delivery(container, condo, clock):
    d = _receive(container, condo)
    wrong = "AAAAAAAA" if d.delivery_code != "AAAAAAAA" else "BBBBBBBB"
    with pytest.raises(BusinessRuleError):
        container.delivery_service.collect(d.id, {"delivery_code": wrong})

    collected = container.delivery_service.collect(d.id, {"delivery_code": d.delivery_code, "delivered_to": 7})
    assert collected.status == DeliveryStatus.COLLECTED
    assert collected.delivered_to == 7
    assert collected.collected_at == clock.now

    with pytest.raises(BusinessRuleError):
        container.delivery_service.collect(d.id)
    with pytest.raises(BusinessRuleError):
        container.delivery_service.update(d.id, {"sender": "Outro"})
    with pytest.raises(BusinessRuleError):
        container.delivery_service.delete(d.id)


def test_delivery_stats(container, condo, clock):
    a = _receive(container, condo)
    _receive(container, condo, type="document")
    container.delivery_service.collect(a.id)

    stats = container.delivery_service.stats(condominium_id=condo.condominium.id)
    assert stats == {"total": 2, "pending": 1, "collected": 1, "received_today": 2, "collected_today": 1}


def test_visitor_flow(container, condo, clock):
    v = _visitor(container, condo)
    assert v.status == VisitorStatus.PENDING
    assert v.vehicle_plate == "ABC1D23"

    with pytest.raises(BusinessRuleError):
        container.visitor_service.check_in(v.id)

    v = container.visitor_service.validate(v.id, {"action": "approve", "validated_by": 3})
    assert v.status == VisitorStatus.SCHEDULED
    assert v.validated_at == clock.now

    clock.now = datetime(2025, 3, 11, 14, 0)
    v = container.visitor_service.check_in(v.id)
    assert v.status == VisitorStatus.CHECKED_IN
    assert v.entry_at == datetime(2025, 3, 11, 14, 0)

    with pytest.raises(BusinessRuleError):
        container.visitor_service.cancel(v.id)

    clock.now = datetime(2025, 3, 11, 15, 30)
    v = container.visitor_service.check_out(v.id)
    assert v.status == VisitorStatus.CHECKED_OUT
    assert v.exit_at == datetime(2025, 3, 11, 15, 30)


def test_visitor_rejection_is_final(container, condo):
    v = _visitor(container, condo)
    v = container.visitor_service.validate(v.id, {"action": "reject", "notes": "Nao autorizado"})
    assert v.status == VisitorStatus.REJECTED
    assert v.notes == "Nao autorizado"

    with pytest.raises(BusinessRuleError):
        container.visitor_service.validate(v.id, {"action": "approve"})


def test_visitor_validate_needs_known_action(container, condo):
    v = _visitor(container, condo)
    with pytest.raises(ValidationError):
        container.visitor_service.validate(v.id, {"action": "maybe"})
    with pytest.raises(ValidationError):
        container.visitor_service.validate(v.id, None)


def test_visitor_update_does_not_touch_status(container, condo):
    v = _visitor(container, condo)
    v = container.visitor_service.update(v.id, {"status": "checked_in", "purpose": "Reparo"})
    assert v.status == VisitorStatus.PENDING
    assert v.purpose == "Reparo"


def test_visitor_listing_by_date(container, condo):
    _visitor(container, condo)
    _visitor(container, condo, name="Outra Visita", scheduled_date="2025-03-12")
    found = container.visitor_service.list(condo.condominium.id, scheduled_date="2025-03-12")
    assert [v.name for v in found] == ["Outra Visita"]
