import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "dayflow_hr_test"),
}

JWT_SECRET = "test-jwt-secret"
JWT_EXPIRATION_TIME = 3600

CACHE_DEFAULT_TTL_MS = 5 * 60 * 1000
DASHBOARD_CACHE_TTL_MS = 60 * 1000

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
