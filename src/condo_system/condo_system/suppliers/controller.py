from __future__ import annotations

from flask import Flask, request

from ..common.http import arg_bool, json_body, ok, page_params
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _post_view(post):
        return post.to_dict(container.supplier_post_service.today())

    @app.route("/api/condominiums/<int:condominium_id>/suppliers", methods=["GET"], endpoint="list_suppliers")
    def list_suppliers(condominium_id: int):
        limit, offset = page_params()
        items = container.supplier_service.list(
            condominium_id,
            category=request.args.get("category"),
            status=request.args.get("status"),
            search=request.args.get("search"),
            limit=limit,
            offset=offset,
        )
        return ok(items)

    @app.route(
        "/api/condominiums/<int:condominium_id>/suppliers/stats",
        methods=["GET"],
        endpoint="supplier_stats",
    )
    def supplier_stats(condominium_id: int):
        return ok(container.supplier_service.stats(condominium_id))

    @app.route("/api/suppliers/categories", methods=["GET"], endpoint="supplier_categories")
    def supplier_categories():
        return ok(container.supplier_service.categories())

    @app.route("/api/suppliers/types", methods=["GET"], endpoint="supplier_types")
    def supplier_types():
        return ok(container.supplier_service.types())

    @app.route("/api/suppliers", methods=["POST"], endpoint="create_supplier")
    def create_supplier():
        return ok(container.supplier_service.create(json_body()), "Supplier created", 201)

    @app.route("/api/suppliers/<int:supplier_id>", methods=["GET"], endpoint="get_supplier")
    def get_supplier(supplier_id: int):
        return ok(container.supplier_service.get(supplier_id))

    @app.route("/api/suppliers/<int:supplier_id>", methods=["PUT", "PATCH"], endpoint="update_supplier")
    def update_supplier(supplier_id: int):
        return ok(container.supplier_service.update(supplier_id, json_body()), "Supplier updated")

    @app.route("/api/suppliers/<int:supplier_id>", methods=["DELETE"], endpoint="delete_supplier")
    def delete_supplier(supplier_id: int):
        container.supplier_service.delete(supplier_id)
        return ok(None, "Supplier deleted")

    @app.route("/api/suppliers/<int:supplier_id>/evaluate", methods=["POST"], endpoint="evaluate_supplier")
    def evaluate_supplier(supplier_id: int):
        s = container.supplier_service.evaluate(supplier_id, json_body().get("evaluation"))
        return ok(s, "Supplier evaluated")

    # -------- Supplier posts --------
    @app.route("/api/supplier-posts", methods=["GET"], endpoint="list_supplier_posts")
    def list_supplier_posts():
        limit, offset = page_params()
        items = container.supplier_post_service.list(
            supplier_id=request.args.get("supplier_id"),
            condominium_id=request.args.get("condominium_id"),
            search=request.args.get("search"),
            active_only=arg_bool("active_only"),
            limit=limit,
            offset=offset,
        )
        return ok([_post_view(p) for p in items])

    @app.route("/api/suppliers/<int:supplier_id>/posts", methods=["GET"], endpoint="list_posts_of_supplier")
    def list_posts_of_supplier(supplier_id: int):
        container.supplier_service.get(supplier_id)
        limit, offset = page_params()
        items = container.supplier_post_service.list(
            supplier_id=supplier_id, active_only=arg_bool("active_only"), limit=limit, offset=offset
        )
        return ok([_post_view(p) for p in items])

    @app.route("/api/supplier-posts", methods=["POST"], endpoint="create_supplier_post")
    def create_supplier_post():
        post = container.supplier_post_service.create(json_body())
        return ok(_post_view(post), "Supplier post created", 201)

    @app.route("/api/supplier-posts/<int:post_id>", methods=["GET"], endpoint="get_supplier_post")
    def get_supplier_post(post_id: int):
        return ok(_post_view(container.supplier_post_service.get(post_id)))

    @app.route("/api/supplier-posts/<int:post_id>", methods=["PUT", "PATCH"], endpoint="update_supplier_post")
    def update_supplier_post(post_id: int):
        post = container.supplier_post_service.update(post_id, json_body())
        return ok(_post_view(post), "Supplier post updated")

    @app.route("/api/supplier-posts/<int:post_id>", methods=["DELETE"], endpoint="delete_supplier_post")
    def delete_supplier_post(post_id: int):
        container.supplier_post_service.delete(post_id)
        return ok(None, "Supplier post deleted")
