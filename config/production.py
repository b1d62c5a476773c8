import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_smc"),
}

SCHOOL_TIMEZONE = os.getenv("SCHOOL_TIMEZONE", "Asia/Kuala_Lumpur")
CHECKIN_WINDOW = {
    "earliest": os.getenv("CHECKIN_EARLIEST", "05:00"),
    "late": os.getenv("CHECKIN_LATE", "07:30"),
    "latest": os.getenv("CHECKIN_LATEST", "09:00"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_CATALOG = bool(int(os.getenv("AUTO_SEED_CATALOG", "0")))
