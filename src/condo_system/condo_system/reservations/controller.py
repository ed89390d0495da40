from __future__ import annotations

from flask import Flask, request

from ..common.http import arg_bool, json_body, ok, page_params
from ..container import Container


def register(app: Flask, container: Container) -> None:
    # -------- Reservation configs --------
    @app.route(
        "/api/condominiums/<int:condominium_id>/reservation-configs",
        methods=["GET"],
        endpoint="list_reservation_configs",
    )
    def list_reservation_configs(condominium_id: int):
        items = container.reservation_config_service.list_by_condominium(
            condominium_id, active_only=arg_bool("active_only")
        )
        return ok(items)

    @app.route(
        "/api/condominiums/<int:condominium_id>/reservable-spaces",
        methods=["GET"],
        endpoint="reservable_spaces",
    )
    def reservable_spaces(condominium_id: int):
        return ok(container.reservation_config_service.reservable_spaces(condominium_id))

    @app.route("/api/reservation-configs", methods=["POST"], endpoint="create_reservation_config")
    def create_reservation_config():
        cfg = container.reservation_config_service.create(json_body())
        return ok(cfg, "Reservation configuration created", 201)

    @app.route("/api/reservation-configs/<int:config_id>", methods=["GET"], endpoint="get_reservation_config")
    def get_reservation_config(config_id: int):
        return ok(container.reservation_config_service.get(config_id))

    @app.route(
        "/api/reservation-configs/<int:config_id>",
        methods=["PUT", "PATCH"],
        endpoint="update_reservation_config",
    )
    def update_reservation_config(config_id: int):
        cfg = container.reservation_config_service.update(config_id, json_body())
        return ok(cfg, "Reservation configuration updated")

    @app.route(
        "/api/reservation-configs/<int:config_id>",
        methods=["DELETE"],
        endpoint="delete_reservation_config",
    )
    def delete_reservation_config(config_id: int):
        container.reservation_config_service.delete(config_id)
        return ok(None, "Reservation configuration deleted")

    @app.route("/api/spaces/<int:space_id>/availability-config", methods=["GET"], endpoint="availability_config")
    def availability_config(space_id: int):
        return ok(container.reservation_config_service.availability_config(space_id))

    # -------- Reservations --------
    @app.route("/api/spaces/<int:space_id>/availability", methods=["GET"], endpoint="check_availability")
    def check_availability(space_id: int):
        data = container.reservation_service.availability(space_id, request.args.get("date"))
        message = "Availability checked" if data["available"] else "Space not available on this day"
        return ok(data, message)

    @app.route("/api/condominiums/<int:condominium_id>/reservations", methods=["GET"], endpoint="list_reservations")
    def list_reservations(condominium_id: int):
        limit, offset = page_params()
        items = container.reservation_service.list(
            condominium_id,
            status=request.args.get("status"),
            space_id=request.args.get("space_id"),
            unit_id=request.args.get("unit_id"),
            start_date=request.args.get("start_date"),
            end_date=request.args.get("end_date"),
            search=request.args.get("search"),
            limit=limit,
            offset=offset,
        )
        return ok(items)

    @app.route(
        "/api/condominiums/<int:condominium_id>/reservations/stats",
        methods=["GET"],
        endpoint="reservation_stats",
    )
    def reservation_stats(condominium_id: int):
        return ok(container.reservation_service.stats(condominium_id))

    @app.route("/api/reservations", methods=["POST"], endpoint="create_reservation")
    def create_reservation():
        r = container.reservation_service.create(json_body())
        return ok(r, "Reservation created", 201)

    @app.route("/api/reservations/<int:reservation_id>", methods=["GET"], endpoint="get_reservation")
    def get_reservation(reservation_id: int):
        return ok(container.reservation_service.get(reservation_id))

    @app.route("/api/reservations/<int:reservation_id>", methods=["PUT", "PATCH"], endpoint="update_reservation")
    def update_reservation(reservation_id: int):
        r = container.reservation_service.update(reservation_id, json_body())
        return ok(r, "Reservation updated")

    @app.route("/api/reservations/<int:reservation_id>", methods=["DELETE"], endpoint="cancel_reservation")
    def cancel_reservation(reservation_id: int):
        reason = json_body().get("reason") or request.args.get("reason")
        r = container.reservation_service.cancel(reservation_id, reason)
        return ok(r, "Reservation cancelled")

    @app.route("/api/reservations/<int:reservation_id>/confirm", methods=["PUT"], endpoint="confirm_reservation")
    def confirm_reservation(reservation_id: int):
        return ok(container.reservation_service.confirm(reservation_id), "Reservation confirmed")

    @app.route("/api/reservations/<int:reservation_id>/reject", methods=["PUT"], endpoint="reject_reservation")
    def reject_reservation(reservation_id: int):
        r = container.reservation_service.reject(reservation_id, json_body().get("reason"))
        return ok(r, "Reservation rejected")

    @app.route("/api/reservations/<int:reservation_id>/complete", methods=["PUT"], endpoint="complete_reservation")
    def complete_reservation(reservation_id: int):
        return ok(container.reservation_service.complete(reservation_id), "Reservation completed")
