from __future__ import annotations

import importlib

from dotenv import load_dotenv

from dayflow_hr.config import get_settings_module
from dayflow_hr.database.bootstrap import DEMO_PASSWORD, ensure_demo_users
from dayflow_hr.database.connection import DatabaseConnection, DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    conn = DatabaseConnection(DBConfig.from_mapping(settings.DB_CONFIG))

    count = ensure_demo_users(conn)
    cfg = conn.config
    print(f"OK: Seeded {count} demo accounts (password: {DEMO_PASSWORD}) -> {cfg.user}@{cfg.host}:{cfg.port}/{cfg.database}")


if __name__ == "__main__":
    main()
