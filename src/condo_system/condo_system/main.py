from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.http import CondoJSONProvider, ok, register_error_handlers
from .core.constants import DEFAULT_PAGE_SIZE
from .core.log_config import configure_logging
from .database.bootstrap import SCHEMA_PATH, SEED_PATH, apply_schema, apply_seed_sql, list_tables
from .database.connection import DBConfig

from .container import Container, build_container
from .announcements.controller import register as register_announcements
from .billing.controller import register as register_billing
from .gate.controller import register as register_gate
from .incidents.controller import register as register_incidents
from .reservations.controller import register as register_reservations
from .residents.controller import register as register_residents
from .spaces.controller import register as register_spaces
from .structure.controller import register as register_structure
from .suppliers.controller import register as register_suppliers

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)
    app.json = CondoJSONProvider(app)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DEFAULT_PAGE_SIZE"] = int(getattr(settings, "DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE))
    configure_logging(level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper())

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=SEED_PATH)
            logger.info("demo seed ready")

        container = build_container(db_config=db_config)

    register_error_handlers(app)

    register_structure(app, container)
    register_spaces(app, container)
    register_reservations(app, container)
    register_residents(app, container)
    register_billing(app, container)
    register_announcements(app, container)
    register_incidents(app, container)
    register_gate(app, container)
    register_suppliers(app, container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return ok({"status": "ok"}, "Service is running")

    return app
