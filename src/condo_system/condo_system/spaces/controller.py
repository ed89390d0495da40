from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok, page_params
from ..common.validators import to_bool
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/condominiums/<int:condominium_id>/spaces", methods=["GET"], endpoint="list_spaces")
    def list_spaces(condominium_id: int):
        limit, offset = page_params()
        reservable = request.args.get("reservable")
        items = container.space_service.list_by_condominium(
            condominium_id,
            space_type=request.args.get("space_type"),
            status=request.args.get("status"),
            reservable=to_bool(reservable) if reservable not in (None, "") else None,
            limit=limit,
            offset=offset,
        )
        return ok([s.to_dict() for s in items])

    @app.route("/api/spaces/types", methods=["GET"], endpoint="space_types")
    def space_types():
        return ok(container.space_service.types())

    @app.route("/api/spaces/statuses", methods=["GET"], endpoint="space_statuses")
    def space_statuses():
        return ok(container.space_service.statuses())

    @app.route("/api/spaces", methods=["POST"], endpoint="create_space")
    def create_space():
        return ok(container.space_service.create(json_body()).to_dict(), "Space created", 201)

    @app.route("/api/spaces/<int:space_id>", methods=["GET"], endpoint="get_space")
    def get_space(space_id: int):
        return ok(container.space_service.get(space_id).to_dict())

    @app.route("/api/spaces/<int:space_id>", methods=["PUT", "PATCH"], endpoint="update_space")
    def update_space(space_id: int):
        return ok(container.space_service.update(space_id, json_body()).to_dict(), "Space updated")

    @app.route("/api/spaces/<int:space_id>", methods=["DELETE"], endpoint="delete_space")
    def delete_space(space_id: int):
        container.space_service.delete(space_id)
        return ok(None, "Space deleted")
