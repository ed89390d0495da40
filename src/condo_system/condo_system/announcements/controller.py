from __future__ import annotations

from flask import Flask, request

from ..common.http import arg_bool, json_body, ok, page_params
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route(
        "/api/condominiums/<int:condominium_id>/announcements",
        methods=["GET"],
        endpoint="list_announcements",
    )
    def list_announcements(condominium_id: int):
        limit, offset = page_params()
        items = container.announcement_service.list(
            condominium_id,
            status=request.args.get("status"),
            priority=request.args.get("priority"),
            search=request.args.get("search"),
            current=arg_bool("current"),
            limit=limit,
            offset=offset,
        )
        return ok(items)

    @app.route(
        "/api/condominiums/<int:condominium_id>/announcements/stats",
        methods=["GET"],
        endpoint="announcement_stats",
    )
    def announcement_stats(condominium_id: int):
        return ok(container.announcement_service.stats(condominium_id))

    @app.route("/api/announcements", methods=["POST"], endpoint="create_announcement")
    def create_announcement():
        return ok(container.announcement_service.create(json_body()), "Announcement created", 201)

    @app.route("/api/announcements/<int:announcement_id>", methods=["GET"], endpoint="get_announcement")
    def get_announcement(announcement_id: int):
        return ok(container.announcement_service.get(announcement_id))

    @app.route(
        "/api/announcements/<int:announcement_id>",
        methods=["PUT", "PATCH"],
        endpoint="update_announcement",
    )
    def update_announcement(announcement_id: int):
        a = container.announcement_service.update(announcement_id, json_body())
        return ok(a, "Announcement updated")

    @app.route("/api/announcements/<int:announcement_id>", methods=["DELETE"], endpoint="delete_announcement")
    def delete_announcement(announcement_id: int):
        container.announcement_service.delete(announcement_id)
        return ok(None, "Announcement deleted")

    @app.route(
        "/api/announcements/<int:announcement_id>/publish",
        methods=["POST"],
        endpoint="publish_announcement",
    )
    def publish_announcement(announcement_id: int):
        return ok(container.announcement_service.publish(announcement_id), "Announcement published")

    @app.route(
        "/api/announcements/<int:announcement_id>/unpublish",
        methods=["POST"],
        endpoint="unpublish_announcement",
    )
    def unpublish_announcement(announcement_id: int):
        return ok(container.announcement_service.unpublish(announcement_id), "Announcement moved back to draft")

    @app.route(
        "/api/announcements/<int:announcement_id>/archive",
        methods=["POST"],
        endpoint="archive_announcement",
    )
    def archive_announcement(announcement_id: int):
        return ok(container.announcement_service.archive(announcement_id), "Announcement archived")
