import os

SECRET_KEY = os.environ["SECRET_KEY"]

DB_CONFIG = {
    "host": os.environ["DB_HOST"],
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.environ["DB_USER"],
    "password": os.environ["DB_PASSWORD"],
    "database": os.getenv("DB_NAME", "dayflow_hr"),
}

JWT_SECRET = os.environ["JWT_SECRET"]
JWT_EXPIRATION_TIME = int(os.getenv("JWT_EXPIRATION_TIME", "3600"))

CACHE_DEFAULT_TTL_MS = int(os.getenv("CACHE_DEFAULT_TTL_MS", str(5 * 60 * 1000)))
DASHBOARD_CACHE_TTL_MS = int(os.getenv("DASHBOARD_CACHE_TTL_MS", str(60 * 1000)))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
