"""JSON helpers shared by every controller.

Controllers stay thin: they parse the request, call a service and wrap the
result with :func:`ok`. Domain errors raised by services bubble up to the
handlers installed by :func:`register_error_handlers`.
"""
from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from flask import Flask, current_app, jsonify, request
from flask.json.provider import DefaultJSONProvider
from werkzeug.exceptions import HTTPException

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..core.exceptions import ConflictError, DomainError, ValidationError
from .datetime_utils import to_date
from .validators import to_bool, to_int

logger = logging.getLogger(__name__)


class CondoJSONProvider(DefaultJSONProvider):
    sort_keys = False

    @staticmethod
    def default(o: Any) -> Any:
        if isinstance(o, datetime):
            return o.isoformat(timespec="seconds")
        if isinstance(o, date):
            return o.isoformat()
        if isinstance(o, time):
            return o.strftime("%H:%M")
        if isinstance(o, Decimal):
            return str(o)
        if isinstance(o, Enum):
            return o.value
        if dataclasses.is_dataclass(o) and not isinstance(o, type):
            return dataclasses.asdict(o)
        if isinstance(o, (set, frozenset)):
            return sorted(o)
        return DefaultJSONProvider.default(o)


def ok(data: Any = None, message: str = "OK", status: int = 200):
    return jsonify({"success": True, "message": message, "data": data}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def arg_int(name: str) -> Optional[int]:
    return to_int(request.args.get(name), name)


def arg_str(name: str) -> Optional[str]:
    v = (request.args.get(name) or "").strip()
    return v or None


def arg_bool(name: str) -> bool:
    return to_bool(request.args.get(name))


def arg_date(name: str, *, required: bool = False) -> Optional[date]:
    return to_date(request.args.get(name), name, required=required)


def page_params() -> tuple[int, int]:
    """Return (limit, offset) from ?per_page=&page= (1-based)."""
    default = int(current_app.config.get("DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE))
    per_page = to_int(request.args.get("per_page"), "per_page", min_value=1) or default
    page = to_int(request.args.get("page"), "page", min_value=1) or 1
    limit = min(per_page, MAX_PAGE_SIZE)
    return limit, (page - 1) * limit


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        body: dict[str, Any] = {"success": False, "message": str(e)}
        if isinstance(e, ConflictError):
            body["conflicts"] = e.conflicts
        return jsonify(body), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"success": False, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = str(e) if app.config.get("DEBUG") else "Internal server error"
        return jsonify({"success": False, "message": message}), 500
