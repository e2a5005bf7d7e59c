from __future__ import annotations

import importlib

from dotenv import load_dotenv

from dayflow_hr.config import get_settings_module
from dayflow_hr.database.bootstrap import apply_schema
from dayflow_hr.database.connection import DatabaseConnection, DBConfig
from dayflow_hr.main import SCHEMA_PATH


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_mapping(settings.DB_CONFIG))

    executed = apply_schema(conn, schema_path=SCHEMA_PATH)
    cfg = conn.config
    print(f"OK: Applied schema.sql -> {cfg.user}@{cfg.host}:{cfg.port}/{cfg.database} (statements={executed})")


if __name__ == "__main__":
    main()
