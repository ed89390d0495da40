from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok, page_params
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/condominiums/<int:condominium_id>/incidents", methods=["GET"], endpoint="list_incidents")
    def list_incidents(condominium_id: int):
        limit, offset = page_params()
        items = container.incident_service.list(
            condominium_id,
            status=request.args.get("status"),
            incident_type=request.args.get("type"),
            priority=request.args.get("priority"),
            block_id=request.args.get("block_id"),
            search=request.args.get("search"),
            limit=limit,
            offset=offset,
        )
        return ok([i.to_dict() for i in items])

    @app.route(
        "/api/condominiums/<int:condominium_id>/incidents/stats",
        methods=["GET"],
        endpoint="incident_stats",
    )
    def incident_stats(condominium_id: int):
        return ok(container.incident_service.stats(condominium_id))

    @app.route("/api/incidents/types", methods=["GET"], endpoint="incident_types")
    def incident_types():
        return ok(container.incident_service.types())

    @app.route("/api/incidents/priorities", methods=["GET"], endpoint="incident_priorities")
    def incident_priorities():
        return ok(container.incident_service.priorities())

    @app.route("/api/incidents/statuses", methods=["GET"], endpoint="incident_statuses")
    def incident_statuses():
        return ok(container.incident_service.statuses())

    @app.route("/api/incidents", methods=["POST"], endpoint="create_incident")
    def create_incident():
        return ok(container.incident_service.create(json_body()).to_dict(), "Incident registered", 201)

    @app.route("/api/incidents/<int:incident_id>", methods=["GET"], endpoint="get_incident")
    def get_incident(incident_id: int):
        return ok(container.incident_service.get(incident_id).to_dict())

    @app.route("/api/incidents/<int:incident_id>", methods=["PUT", "PATCH"], endpoint="update_incident")
    def update_incident(incident_id: int):
        i = container.incident_service.update(incident_id, json_body())
        return ok(i.to_dict(), "Incident updated")

    @app.route("/api/incidents/<int:incident_id>", methods=["DELETE"], endpoint="delete_incident")
    def delete_incident(incident_id: int):
        container.incident_service.delete(incident_id)
        return ok(None, "Incident deleted")
