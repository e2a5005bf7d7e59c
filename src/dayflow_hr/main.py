from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .auth.guard import TOKEN_SERVICE_EXTENSION
from .common.controller import register as register_cache_admin
from .common.errors import register_error_handlers
from .common.log import configure_logging
from .config import get_settings_module
from .container import Container, build_container
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema
from .employees.controller import register as register_employees
from .leave.controller import register as register_leave
from .notifications.controller import register as register_notifications
from .payroll.controller import register as register_payroll
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
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
        container = build_container(db_config=db_config, settings=settings)
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(container.conn, schema_path=SCHEMA_PATH)

    app.extensions[TOKEN_SERVICE_EXTENSION] = container.tokens
    app.extensions["dayflow_hr.container"] = container

    register_error_handlers(app)
    register_auth(app, container)
    register_users(app, container)
    register_employees(app, container)
    register_attendance(app, container)
    register_dashboard(app, container)
    register_leave(app, container)
    register_payroll(app, container)
    register_notifications(app, container)
    register_cache_admin(app, container)

    return app
