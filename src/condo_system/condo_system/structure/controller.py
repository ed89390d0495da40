from __future__ import annotations

from flask import Flask, request

from ..common.http import arg_bool, arg_str, json_body, ok, page_params
from ..container import Container


def register(app: Flask, container: Container) -> None:
    # -------- Condominiums --------
    @app.route("/api/condominiums", methods=["GET"], endpoint="list_condominiums")
    def list_condominiums():
        limit, offset = page_params()
        items = container.condominium_service.list(
            active_only=arg_bool("active_only"), search=arg_str("search"), limit=limit, offset=offset
        )
        return ok(items)

    @app.route("/api/condominiums", methods=["POST"], endpoint="create_condominium")
    def create_condominium():
        c = container.condominium_service.create(json_body())
        return ok(c, "Condominium created", 201)

    @app.route("/api/condominiums/<int:condominium_id>", methods=["GET"], endpoint="get_condominium")
    def get_condominium(condominium_id: int):
        return ok(container.condominium_service.get(condominium_id))

    @app.route("/api/condominiums/<int:condominium_id>", methods=["PUT", "PATCH"], endpoint="update_condominium")
    def update_condominium(condominium_id: int):
        c = container.condominium_service.update(condominium_id, json_body())
        return ok(c, "Condominium updated")

    @app.route("/api/condominiums/<int:condominium_id>", methods=["DELETE"], endpoint="delete_condominium")
    def delete_condominium(condominium_id: int):
        container.condominium_service.delete(condominium_id)
        return ok(None, "Condominium deleted")

    @app.route("/api/structure/complete", methods=["GET"], endpoint="complete_structure")
    def complete_structure():
        return ok(container.condominium_service.complete_structure(request.args.get("condominium_id")))

    # -------- Blocks --------
    @app.route("/api/condominiums/<int:condominium_id>/blocks", methods=["GET"], endpoint="list_blocks")
    def list_blocks(condominium_id: int):
        limit, offset = page_params()
        return ok(container.block_service.list_by_condominium(condominium_id, limit=limit, offset=offset))

    @app.route("/api/condominiums/<int:condominium_id>/blocks/stats", methods=["GET"], endpoint="block_stats")
    def block_stats(condominium_id: int):
        return ok(container.block_service.stats(condominium_id))

    @app.route("/api/blocks", methods=["POST"], endpoint="create_block")
    def create_block():
        return ok(container.block_service.create(json_body()), "Block created", 201)

    @app.route("/api/blocks/<int:block_id>", methods=["GET"], endpoint="get_block")
    def get_block(block_id: int):
        return ok(container.block_service.get(block_id))

    @app.route("/api/blocks/<int:block_id>", methods=["PUT", "PATCH"], endpoint="update_block")
    def update_block(block_id: int):
        return ok(container.block_service.update(block_id, json_body()), "Block updated")

    @app.route("/api/blocks/<int:block_id>", methods=["DELETE"], endpoint="delete_block")
    def delete_block(block_id: int):
        container.block_service.delete(block_id)
        return ok(None, "Block deleted")

    # -------- Units --------
    @app.route("/api/condominiums/<int:condominium_id>/units", methods=["GET"], endpoint="list_units")
    def list_units(condominium_id: int):
        limit, offset = page_params()
        items = container.unit_service.list_by_condominium(
            condominium_id,
            block_id=request.args.get("block_id"),
            status=request.args.get("status"),
            unit_type=request.args.get("type"),
            limit=limit,
            offset=offset,
        )
        return ok(items)

    @app.route("/api/units", methods=["POST"], endpoint="create_unit")
    def create_unit():
        return ok(container.unit_service.create(json_body()), "Unit created", 201)

    @app.route("/api/units/<int:unit_id>", methods=["GET"], endpoint="get_unit")
    def get_unit(unit_id: int):
        return ok(container.unit_service.get(unit_id))

    @app.route("/api/units/<int:unit_id>", methods=["PUT", "PATCH"], endpoint="update_unit")
    def update_unit(unit_id: int):
        return ok(container.unit_service.update(unit_id, json_body()), "Unit updated")

    @app.route("/api/units/<int:unit_id>", methods=["DELETE"], endpoint="delete_unit")
    def delete_unit(unit_id: int):
        container.unit_service.delete(unit_id)
        return ok(None, "Unit deleted")
