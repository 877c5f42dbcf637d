from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import (
    DEFAULT_ATTENDANCE_WINDOW_MINUTES,
    DEFAULT_STARTING_SOON_MINUTES,
    DEFAULT_TIMEZONE,
)
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .notifications.controller import register as register_notifications

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    Passing a ``container`` skips settings-driven database wiring, which is
    how tests run the API on in-memory repositories.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

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
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            timezone=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
            window_minutes=int(getattr(settings, "ATTENDANCE_WINDOW_MINUTES", DEFAULT_ATTENDANCE_WINDOW_MINUTES)),
            soon_minutes=int(getattr(settings, "STARTING_SOON_MINUTES", DEFAULT_STARTING_SOON_MINUTES)),
        )

    @app.route("/api/health", methods=["GET"], endpoint="api_health")
    def api_health():
        return jsonify({"status": "ok"}), 200

    register_notifications(app, container)
    register_attendance(app, container)

    return app
