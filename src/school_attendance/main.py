from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .database.bootstrap import apply_schema, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .catalog.controller import register as register_catalog
from .reports.controller import register as register_reports
from .students.controller import register as register_students

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Passing a container skips database bootstrap (tests wire in-memory repositories).
    """

    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            checkin_window=getattr(settings, "CHECKIN_WINDOW"),
            timezone=getattr(settings, "SCHOOL_TIMEZONE"),
        )

    # The catalog must be complete before the first scan is served.
    if bool(getattr(settings, "AUTO_SEED_CATALOG", False)):
        container.catalog_service.seed_defaults()
    container.catalog_service.load()
    logger.info("check-in window %s", container.policy.describe())

    app.extensions["school_attendance"] = container

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "OK", "message": "Attendance system is running"})

    register_catalog(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
