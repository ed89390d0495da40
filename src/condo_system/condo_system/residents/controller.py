from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok, page_params
from ..common.validators import to_bool
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/condominiums/<int:condominium_id>/residents", methods=["GET"], endpoint="list_residents")
    def list_residents(condominium_id: int):
        limit, offset = page_params()
        with_tenant = request.args.get("with_tenant")
        items = container.resident_service.list_by_condominium(
            condominium_id,
            search=request.args.get("search"),
            with_tenant=to_bool(with_tenant) if with_tenant not in (None, "") else None,
            limit=limit,
            offset=offset,
        )
        return ok(items)

    @app.route(
        "/api/condominiums/<int:condominium_id>/residents/stats",
        methods=["GET"],
        endpoint="resident_stats",
    )
    def resident_stats(condominium_id: int):
        return ok(container.resident_service.stats(condominium_id))

    @app.route("/api/residents", methods=["POST"], endpoint="create_resident")
    def create_resident():
        return ok(container.resident_service.create(json_body()), "Resident created", 201)

    @app.route("/api/residents/<int:resident_id>", methods=["GET"], endpoint="get_resident")
    def get_resident(resident_id: int):
        return ok(container.resident_service.get(resident_id))

    @app.route("/api/residents/<int:resident_id>", methods=["PUT", "PATCH"], endpoint="update_resident")
    def update_resident(resident_id: int):
        return ok(container.resident_service.update(resident_id, json_body()), "Resident updated")

    @app.route("/api/residents/<int:resident_id>", methods=["DELETE"], endpoint="delete_resident")
    def delete_resident(resident_id: int):
        container.resident_service.delete(resident_id)
        return ok(None, "Resident deleted")
