from __future__ import annotations

import importlib
from datetime import datetime
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.web import fail, ok
from .container import Container, build_container
from .core.constants import DEFAULT_ISOLATION_LEVEL
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_users, list_tables
from .logging_config import configure_logging
from .schedules.controller import register as register_schedules
from .shifts.controller import register as register_shifts
from .swaps.controller import register as register_swaps
from .units.controller import register as register_units
from .users.controller import register as register_users

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    logger = configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            ensure_demo_users(db_config)
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            isolation_level=getattr(settings, "DB_ISOLATION_LEVEL", DEFAULT_ISOLATION_LEVEL),
        )

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return ok(message="CSSD Roster API is running", timestamp=datetime.now().isoformat())

    @app.errorhandler(404)
    def not_found(_e):
        return fail("Endpoint not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(_e):
        return fail("Method not allowed", 405)

    register_users(app, container)
    register_shifts(app, container)
    register_units(app, container)
    register_schedules(app, container)
    register_swaps(app, container)

    return app
