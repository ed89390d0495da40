from __future__ import annotations

from flask import Flask, request

from ..common.http import json_body, ok, page_params
from ..container import Container


def register(app: Flask, container: Container) -> None:
    # -------- Deliveries --------
    @app.route("/api/deliveries", methods=["GET"], endpoint="list_deliveries")
    def list_deliveries():
        limit, offset = page_params()
        items = container.delivery_service.list(
            condominium_id=request.args.get("condominium_id"),
            unit_id=request.args.get("unit_id"),
            status=request.args.get("status"),
            delivery_type=request.args.get("type"),
            search=request.args.get("search"),
            limit=limit,
            offset=offset,
        )
        return ok(items)

    @app.route("/api/deliveries/stats", methods=["GET"], endpoint="delivery_stats")
    def delivery_stats():
        return ok(container.delivery_service.stats(condominium_id=request.args.get("condominium_id")))

    @app.route("/api/deliveries", methods=["POST"], endpoint="create_delivery")
    def create_delivery():
        return ok(container.delivery_service.create(json_body()), "Delivery registered", 201)

    @app.route("/api/deliveries/find-by-code", methods=["POST"], endpoint="find_delivery_by_code")
    def find_delivery_by_code():
        return ok(container.delivery_service.find_by_code(json_body().get("code")), "Delivery found")

    @app.route("/api/deliveries/<int:delivery_id>", methods=["GET"], endpoint="get_delivery")
    def get_delivery(delivery_id: int):
        return ok(container.delivery_service.get(delivery_id))

    @app.route("/api/deliveries/<int:delivery_id>", methods=["PUT", "PATCH"], endpoint="update_delivery")
    def update_delivery(delivery_id: int):
        return ok(container.delivery_service.update(delivery_id, json_body()), "Delivery updated")

    @app.route("/api/deliveries/<int:delivery_id>", methods=["DELETE"], endpoint="delete_delivery")
    def delete_delivery(delivery_id: int):
        container.delivery_service.delete(delivery_id)
        return ok(None, "Delivery deleted")

    @app.route("/api/deliveries/<int:delivery_id>/collect", methods=["POST"], endpoint="collect_delivery")
    def collect_delivery(delivery_id: int):
        return ok(container.delivery_service.collect(delivery_id, json_body()), "Delivery collected")

    # -------- Visitors --------
    @app.route("/api/condominiums/<int:condominium_id>/visitors", methods=["GET"], endpoint="list_visitors")
    def list_visitors(condominium_id: int):
        limit, offset = page_params()
        items = container.visitor_service.list(
            condominium_id,
            status=request.args.get("status"),
            visitor_type=request.args.get("visitor_type"),
            unit_id=request.args.get("unit_id"),
            scheduled_date=request.args.get("date"),
            search=request.args.get("search"),
            limit=limit,
            offset=offset,
        )
        return ok(items)

    @app.route("/api/visitors", methods=["POST"], endpoint="register_visitor")
    def register_visitor():
        v = container.visitor_service.register(json_body())
        return ok(v, "Visitor registered, awaiting validation", 201)

    @app.route("/api/visitors/<int:visitor_id>", methods=["GET"], endpoint="get_visitor")
    def get_visitor(visitor_id: int):
        return ok(container.visitor_service.get(visitor_id))

    @app.route("/api/visitors/<int:visitor_id>", methods=["PUT", "PATCH"], endpoint="update_visitor")
    def update_visitor(visitor_id: int):
        return ok(container.visitor_service.update(visitor_id, json_body()), "Visitor updated")

    @app.route("/api/visitors/<int:visitor_id>", methods=["DELETE"], endpoint="delete_visitor")
    def delete_visitor(visitor_id: int):
        container.visitor_service.delete(visitor_id)
        return ok(None, "Visitor deleted")

    @app.route("/api/visitors/<int:visitor_id>/validate", methods=["POST"], endpoint="validate_visitor")
    def validate_visitor(visitor_id: int):
        v = container.visitor_service.validate(visitor_id, json_body())
        return ok(v, "Visitor approved" if v.status.value == "scheduled" else "Visitor rejected")

    @app.route("/api/visitors/<int:visitor_id>/check-in", methods=["POST"], endpoint="visitor_check_in")
    def visitor_check_in(visitor_id: int):
        return ok(container.visitor_service.check_in(visitor_id), "Check-in registered")

    @app.route("/api/visitors/<int:visitor_id>/check-out", methods=["POST"], endpoint="visitor_check_out")
    def visitor_check_out(visitor_id: int):
        return ok(container.visitor_service.check_out(visitor_id), "Check-out registered")

    @app.route("/api/visitors/<int:visitor_id>/cancel", methods=["POST"], endpoint="cancel_visitor")
    def cancel_visitor(visitor_id: int):
        return ok(container.visitor_service.cancel(visitor_id), "Visit cancelled")
