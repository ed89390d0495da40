from __future__ import annotations

import csv
import io

from flask import Flask, request

from ..common.http import arg_bool, json_body, ok, page_params
from ..container import Container
from .service import EXPORT_FIELDS


def register(app: Flask, container: Container) -> None:
    def _billing_view(billing):
        return billing.to_dict(container.unit_billing_service.today())

    def _write_csv(*, rows: list[dict], filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    # -------- Monthly fees --------
    @app.route("/api/billing/monthly-fees", methods=["GET"], endpoint="list_monthly_fees")
    def list_monthly_fees():
        limit, offset = page_params()
        items = container.monthly_fee_service.list(
            condominium_id=request.args.get("condominium_id"),
            status=request.args.get("status"),
            reference_month=request.args.get("reference_month"),
            year=request.args.get("year"),
            limit=limit,
            offset=offset,
        )
        return ok(items)

    @app.route("/api/billing/monthly-fees", methods=["POST"], endpoint="create_monthly_fee")
    def create_monthly_fee():
        return ok(container.monthly_fee_service.create(json_body()), "Monthly fee created", 201)

    @app.route("/api/billing/monthly-fees/<int:fee_id>", methods=["GET"], endpoint="get_monthly_fee")
    def get_monthly_fee(fee_id: int):
        return ok(container.monthly_fee_service.get(fee_id))

    @app.route("/api/billing/monthly-fees/<int:fee_id>", methods=["PUT", "PATCH"], endpoint="update_monthly_fee")
    def update_monthly_fee(fee_id: int):
        return ok(container.monthly_fee_service.update(fee_id, json_body()), "Monthly fee updated")

    @app.route("/api/billing/monthly-fees/<int:fee_id>", methods=["DELETE"], endpoint="delete_monthly_fee")
    def delete_monthly_fee(fee_id: int):
        container.monthly_fee_service.delete(fee_id)
        return ok(None, "Monthly fee deleted")

    @app.route(
        "/api/billing/monthly-fees/<int:fee_id>/statistics",
        methods=["GET"],
        endpoint="monthly_fee_statistics",
    )
    def monthly_fee_statistics(fee_id: int):
        return ok(container.monthly_fee_service.statistics(fee_id))

    @app.route(
        "/api/billing/monthly-fees/<int:fee_id>/export.csv",
        methods=["GET"],
        endpoint="monthly_fee_export_csv",
    )
    def monthly_fee_export_csv(fee_id: int):
        fee, rows = container.monthly_fee_service.export_rows(fee_id)
        filename = f"billings_{fee.condominium_id}_{fee.reference_month:%Y-%m}.csv"
        return _write_csv(rows=rows, filename=filename)

    # -------- Unit billings --------
    @app.route("/api/billing/unit-billings", methods=["GET"], endpoint="list_unit_billings")
    def list_unit_billings():
        limit, offset = page_params()
        items = container.unit_billing_service.list(
            monthly_fee_id=request.args.get("monthly_fee_id"),
            unit_id=request.args.get("unit_id"),
            status=request.args.get("status"),
            condominium_id=request.args.get("condominium_id"),
            overdue=arg_bool("overdue"),
            limit=limit,
            offset=offset,
        )
        return ok([_billing_view(b) for b in items])

    @app.route("/api/billing/unit-billings", methods=["POST"], endpoint="create_unit_billing")
    def create_unit_billing():
        b = container.unit_billing_service.create(json_body())
        return ok(_billing_view(b), "Unit billing created", 201)

    @app.route("/api/billing/unit-billings/generate", methods=["POST"], endpoint="generate_unit_billings")
    def generate_unit_billings():
        items = container.unit_billing_service.generate(json_body())
        return ok(
            {"count": len(items), "billings": [_billing_view(b) for b in items]},
            "Billings generated",
            201,
        )

    @app.route("/api/billing/unit-billings/<int:billing_id>", methods=["GET"], endpoint="get_unit_billing")
    def get_unit_billing(billing_id: int):
        return ok(_billing_view(container.unit_billing_service.get(billing_id)))

    @app.route(
        "/api/billing/unit-billings/<int:billing_id>",
        methods=["PUT", "PATCH"],
        endpoint="update_unit_billing",
    )
    def update_unit_billing(billing_id: int):
        b = container.unit_billing_service.update(billing_id, json_body())
        return ok(_billing_view(b), "Unit billing updated")

    @app.route("/api/billing/unit-billings/<int:billing_id>", methods=["DELETE"], endpoint="delete_unit_billing")
    def delete_unit_billing(billing_id: int):
        container.unit_billing_service.delete(billing_id)
        return ok(None, "Unit billing deleted")

    @app.route(
        "/api/billing/unit-billings/<int:billing_id>/update-status",
        methods=["PUT"],
        endpoint="refresh_unit_billing_status",
    )
    def refresh_unit_billing_status(billing_id: int):
        b = container.unit_billing_service.refresh_status(billing_id)
        return ok(_billing_view(b), "Status updated")

    # -------- Payments --------
    @app.route("/api/billing/payments", methods=["GET"], endpoint="list_payments")
    def list_payments():
        limit, offset = page_params()
        items = container.payment_service.list(
            unit_billing_id=request.args.get("unit_billing_id"),
            condominium_id=request.args.get("condominium_id"),
            payment_method=request.args.get("payment_method"),
            start_date=request.args.get("start_date"),
            end_date=request.args.get("end_date"),
            limit=limit,
            offset=offset,
        )
        return ok(items)

    @app.route("/api/billing/payments/statistics", methods=["GET"], endpoint="payment_statistics")
    def payment_statistics():
        data = container.payment_service.statistics(
            start_date=request.args.get("start_date"),
            end_date=request.args.get("end_date"),
            condominium_id=request.args.get("condominium_id"),
        )
        return ok(data)

    @app.route("/api/billing/payments", methods=["POST"], endpoint="create_payment")
    def create_payment():
        return ok(container.payment_service.create(json_body()), "Payment recorded", 201)

    @app.route("/api/billing/payments/<int:payment_id>", methods=["GET"], endpoint="get_payment")
    def get_payment(payment_id: int):
        return ok(container.payment_service.get(payment_id))

    @app.route("/api/billing/payments/<int:payment_id>", methods=["PUT", "PATCH"], endpoint="update_payment")
    def update_payment(payment_id: int):
        return ok(container.payment_service.update(payment_id, json_body()), "Payment updated")

    @app.route("/api/billing/payments/<int:payment_id>", methods=["DELETE"], endpoint="delete_payment")
    def delete_payment(payment_id: int):
        container.payment_service.delete(payment_id)
        return ok(None, "Payment deleted")
