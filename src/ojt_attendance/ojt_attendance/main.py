from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .common.logging_utils import configure_logging
from .core.constants import DEFAULT_RECONCILE_WORKERS, DEFAULT_REVIEW_WORKERS, DEFAULT_TIMEZONE
from .database.bootstrap import apply_schema, list_tables

from .container import Container, build_container
from .overtime.controller import register as register_overtime
from .punches.controller import register as register_punches
from .reconciliation.controller import register as register_reconciliation
from .review.controller import register as register_review
from .schedules.controller import register as register_schedules

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory. Pass a prebuilt container to skip the database wiring."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

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
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            timezone=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
            reconcile_workers=int(getattr(settings, "RECONCILE_WORKERS", DEFAULT_RECONCILE_WORKERS)),
            review_workers=int(getattr(settings, "REVIEW_WORKERS", DEFAULT_REVIEW_WORKERS)),
            raw_fallback_for_tracked=bool(getattr(settings, "RAW_FALLBACK_FOR_TRACKED", True)),
        )

    app.extensions["ojt_container"] = container

    @app.route("/api/health", methods=["GET"], endpoint="api_health")
    def api_health():
        return jsonify({"success": True, "timezone": str(container.tz)}), 200

    register_punches(app, container)
    register_review(app, container)
    register_reconciliation(app, container)
    register_schedules(app, container)
    register_overtime(app, container)

    return app
