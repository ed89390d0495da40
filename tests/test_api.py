from __future__ import annotations

import pytest

from src.condo_system.condo_system.main import create_app


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    return app.test_client()


def _post(client, url, payload):
    res = client.post(url, json=payload)
    assert res.status_code == 201, res.get_json()
    return res.get_json()["data"]


@pytest.fixture
def hall(client, condo):
    space = _post(
        client,
        "/api/spaces",
        {"condominium_id": condo.condominium.id, "number": "SF-01", "space_type": "party_hall", "reservable": True},
    )
    _post(
        client,
        "/api/reservation-configs",
        {
            "condominium_id": condo.condominium.id,
            "space_id": space["id"],
            "available_days": ["saturday"],
            "start_time": "10:00",
            "end_time": "22:00",
            "duration_minutes": 120,
            "hourly_rate": 40,
        },
    )
    return space


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.get_json() == {"success": True, "message": "Service is running", "data": {"status": "ok"}}


def test_validation_error_shape(client):
    res = client.post("/api/condominiums", json={})
    assert res.status_code == 422
    body = res.get_json()
    assert body["success"] is False
    assert body["message"] == "name is required"


def test_not_found(client):
    res = client.get("/api/units/12345")
    assert res.status_code == 404
    assert res.get_json()["message"] == "Unit not found"


def test_unknown_route_returns_json(client):
    res = client.get("/api/nope")
    assert res.status_code == 404
    assert res.get_json()["success"] is False


def test_reservation_roundtrip_serializes_values(client, hall, condo):
    data = _post(
        client,
        "/api/reservations",
        {
            "space_id": hall["id"],
            "reservation_date": "2025-03-15",
            "start_time": "14:00",
            "end_time": "17:00",
            "contact_name": "Ana",
            "contact_phone": "11999990000",
        },
    )
    assert data["status"] == "pending"
    assert data["start_time"] == "14:00"
    assert data["reservation_date"] == "2025-03-15"
    assert data["total_amount"] == "120.00"

    res = client.get(f"/api/spaces/{hall['id']}/availability", query_string={"date": "2025-03-15"})
    slots = res.get_json()["data"]["free_slots"]
    assert slots == [{"start_time": "10:00", "end_time": "14:00"}, {"start_time": "17:00", "end_time": "22:00"}]


def test_reservation_conflict_returns_409_with_details(client, hall):
    payload = {
        "space_id": hall["id"],
        "reservation_date": "2025-03-15",
        "start_time": "14:00",
        "end_time": "16:00",
        "contact_name": "Ana",
        "contact_phone": "11999990000",
    }
    first = _post(client, "/api/reservations", payload)

    res = client.post("/api/reservations", json={**payload, "start_time": "15:00", "end_time": "17:00"})
    assert res.status_code == 409
    body = res.get_json()
    assert body["conflicts"] == [
        {"id": first["id"], "contact_name": "Ana", "start_time": "14:00", "end_time": "16:00", "status": "pending"}
    ]


def test_reservation_cancel_via_delete(client, hall):
    r = _post(
        client,
        "/api/reservations",
        {
            "space_id": hall["id"],
            "reservation_date": "2025-03-15",
            "start_time": "10:00",
            "end_time": "12:00",
            "contact_name": "Ana",
            "contact_phone": "11999990000",
        },
    )
    res = client.delete(f"/api/reservations/{r['id']}", json={"reason": "Viagem"})
    assert res.status_code == 200
    assert res.get_json()["data"]["cancellation_reason"] == "Viagem"


def test_pagination_params(client, condo):
    res = client.get(f"/api/condominiums/{condo.condominium.id}/units", query_string={"per_page": 3, "page": 2})
    assert res.status_code == 200
    assert len(res.get_json()["data"]) == 1

    res = client.get(f"/api/condominiums/{condo.condominium.id}/units", query_string={"page": 0})
    assert res.status_code == 422


def test_billing_generate_and_export(client, condo):
    fee = _post(
        client,
        "/api/billing/monthly-fees",
        {
            "condominium_id": condo.condominium.id,
            "reference_month": "2025-03-01",
            "base_value": "800",
            "due_date": "2025-03-20",
        },
    )
    generated = _post(client, "/api/billing/unit-billings/generate", {"monthly_fee_id": fee["id"]})
    assert generated["count"] == 4
    assert generated["billings"][0]["total_amount"] == "200.00"
    assert generated["billings"][0]["is_overdue"] is False

    res = client.get(f"/api/billing/monthly-fees/{fee['id']}/export.csv")
    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert f"billings_{condo.condominium.id}_2025-03.csv" in res.headers["Content-Disposition"]
    lines = res.data.decode("utf-8-sig").splitlines()
    assert lines[0].startswith("unit_id,unit_number,ideal_fraction")
    assert len(lines) == 5


def test_incident_catalogue_routes(client):
    res = client.get("/api/incidents/statuses")
    values = [s["value"] for s in res.get_json()["data"]]
    assert values == ["aberta", "em_andamento", "resolvida", "fechada"]


def test_delivery_collect_flow(client, condo):
    d = _post(client, "/api/deliveries", {"unit_id": condo.units[0].id, "recipient_name": "Marta", "type": "package"})
    found = client.post("/api/deliveries/find-by-code", json={"code": d["delivery_code"]})
    assert found.get_json()["data"]["id"] == d["id"]

    res = client.post(f"/api/deliveries/{d['id']}/collect", json={"delivery_code": d["delivery_code"]})
    assert res.status_code == 200
    assert res.get_json()["data"]["status"] == "collected"

    again = client.post(f"/api/deliveries/{d['id']}/collect", json={})
    assert again.status_code == 400


def test_supplier_posts_routes(client, condo):
    supplier = _post(
        client,
        "/api/suppliers",
        {
            "condominium_id": condo.condominium.id,
            "company_name": "Pinturas Sol",
            "contact_name": "Caio",
            "cnpj": "33444555000122",
            "category": "other",
        },
    )
    post = _post(
        client,
        "/api/supplier-posts",
        {
            "supplier_id": supplier["id"],
            "title": "Pintura de fachada",
            "description": "Orçamento sem compromisso.",
            "price": 1200,
            "expires_at": "2025-03-10",
        },
    )
    assert post["price"] == "1200"
    assert post["is_expired"] is True

    res = client.get(f"/api/suppliers/{supplier['id']}/posts", query_string={"active_only": "true"})
    assert res.get_json()["data"] == []

    res = client.put(f"/api/supplier-posts/{post['id']}", json={"expires_at": "2025-06-30"})
    assert res.status_code == 200
    assert res.get_json()["data"]["is_expired"] is False

    res = client.get("/api/supplier-posts", query_string={"active_only": "1", "condominium_id": condo.condominium.id})
    assert [p["id"] for p in res.get_json()["data"]] == [post["id"]]

    res = client.post(
        "/api/supplier-posts",
        json={"supplier_id": supplier["id"], "title": "x", "description": "y", "website": "nope"},
    )
    assert res.status_code == 422


def test_fractional_integer_field_is_422(client, condo):
    res = client.post("/api/blocks", json={"condominium_id": condo.condominium.id, "name": "C", "floors": 2.5})
    assert res.status_code == 422
    assert res.get_json()["message"] == "floors must be an integer"
