import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_smc_test"),
}

SCHOOL_TIMEZONE = "Asia/Kuala_Lumpur"
CHECKIN_WINDOW = {"earliest": "05:00", "late": "07:30", "latest": "09:00"}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
AUTO_SEED_CATALOG = False
