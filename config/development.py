import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_operations"),
}

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Calendar days, "today" and week/month windows are computed in this zone.
ORG_TIMEZONE = os.getenv("ORG_TIMEZONE", "Asia/Jakarta")

ROUNDING_ENABLED = bool(int(os.getenv("ROUNDING_ENABLED", "1")))
ROUNDING_INTERVAL_MINUTES = int(os.getenv("ROUNDING_INTERVAL_MINUTES", "15"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
