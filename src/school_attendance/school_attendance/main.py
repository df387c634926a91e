from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables, missing_tables
from .justifications.controller import register as register_justifications
from .permissions.controller import register as register_permissions

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = getattr(settings, "MAX_CONTENT_LENGTH", None)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

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

        if getattr(settings, "AUTO_INIT_DB", False):
            schema_path = DATABASE_DIR / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            missing = missing_tables(schema_path, list_tables(db_config))
            if missing:
                logger.warning("schema applied but tables are missing: %s", ", ".join(missing))
            else:
                logger.info("schema ready")
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            upload_folder=getattr(settings, "DOCUMENT_UPLOAD_FOLDER"),
            document_base_url=getattr(settings, "DOCUMENT_BASE_URL", "/uploads/justifications"),
            defer_justification=bool(getattr(settings, "DEFER_JUSTIFICATION", True)),
        )

    register_error_handlers(app)
    register_permissions(app, container)
    register_attendance(app, container)
    register_justifications(app, container)

    return app
