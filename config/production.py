import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hr_operations"),
}

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

ORG_TIMEZONE = os.getenv("ORG_TIMEZONE", "Asia/Jakarta")

ROUNDING_ENABLED = bool(int(os.getenv("ROUNDING_ENABLED", "1")))
ROUNDING_INTERVAL_MINUTES = int(os.getenv("ROUNDING_INTERVAL_MINUTES", "15"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
