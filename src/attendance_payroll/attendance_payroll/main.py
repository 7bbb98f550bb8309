from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, apply_seed_sql, list_tables

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .employees.controller import register as register_employees

_logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        auto_init_db = bool(getattr(settings, "AUTO_INIT_DB", False))
        auto_seed_db = bool(getattr(settings, "AUTO_SEED_DB", False))
        if auto_init_db:
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            _logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if auto_seed_db:
            seed_path = Path(__file__).resolve().parents[3] / "database" / "seed.sql"
            apply_seed_sql(db_config, seed_path=seed_path)

        container = build_container(
            db_config=db_config,
            late_penalty=getattr(settings, "LATE_PENALTY", "5.00"),
            days_in_period=int(getattr(settings, "DAYS_IN_PERIOD", 28)),
            lookup_timeout_seconds=float(getattr(settings, "DIRECTORY_LOOKUP_TIMEOUT_SECONDS", 5)),
            lookup_workers=int(getattr(settings, "DIRECTORY_LOOKUP_WORKERS", 4)),
        )

    app.extensions["container"] = container
    register_employees(app, container)
    register_attendance(app, container)

    return app
