from __future__ import annotations

import importlib

from dotenv import load_dotenv

from config import get_settings_module
from ponto_certo.database.bootstrap import apply_schema, ensure_demo_organization, list_tables


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config)
    if getattr(settings, "AUTO_SEED_DB", False):
        ensure_demo_organization(
            db_config,
            admin_email=getattr(settings, "DEMO_ADMIN_EMAIL", "admin@demo.com"),
            admin_password=getattr(settings, "DEMO_ADMIN_PASSWORD", "admin123"),
        )
    tables = list_tables(db_config)
    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(tables={len(tables)})"
    )


if __name__ == "__main__":
    main()
