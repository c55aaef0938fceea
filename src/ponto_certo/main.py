from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.web import register_error_handlers
from .container import build_container
from .database.bootstrap import apply_schema, ensure_demo_organization, list_tables

from .closing.controller import register as register_closing
from .documents.controller import register as register_documents
from .holiday_calendar.controller import register as register_holidays
from .organizations.controller import register as register_organizations
from .payroll.controller import register as register_payroll
from .reports.controller import register as register_reports
from .requests.controller import register as register_requests
from .schedules.controller import register as register_schedules
from .time_records.controller import register as register_time_records
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["JSON_AS_ASCII"] = False

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
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
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        ensure_demo_organization(
            db_config,
            admin_email=getattr(settings, "DEMO_ADMIN_EMAIL", "admin@demo.com"),
            admin_password=getattr(settings, "DEMO_ADMIN_PASSWORD", "admin123"),
        )
        logger.info("demo organization ready")

    container = build_container(db_config=db_config)

    register_error_handlers(app)
    register_users(app, container)
    register_organizations(app, container)
    register_schedules(app, container)
    register_time_records(app, container)
    register_holidays(app, container)
    register_payroll(app, container)
    register_closing(app, container)
    register_requests(app, container)
    register_documents(app, container)
    register_reports(app, container)

    return app
