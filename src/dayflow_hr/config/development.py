import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "dayflow_hr"),
}

JWT_SECRET = os.getenv("JWT_SECRET", "your-secret-key")
JWT_EXPIRATION_TIME = int(os.getenv("JWT_EXPIRATION_TIME", "3600"))

CACHE_DEFAULT_TTL_MS = int(os.getenv("CACHE_DEFAULT_TTL_MS", str(5 * 60 * 1000)))
DASHBOARD_CACHE_TTL_MS = int(os.getenv("DASHBOARD_CACHE_TTL_MS", str(60 * 1000)))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
