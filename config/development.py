import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3307")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_smc"),
}

# School-local clock and check-in window (HH:MM)
SCHOOL_TIMEZONE = os.getenv("SCHOOL_TIMEZONE", "Asia/Kuala_Lumpur")
CHECKIN_WINDOW = {
    "earliest": os.getenv("CHECKIN_EARLIEST", "05:00"),
    "late": os.getenv("CHECKIN_LATE", "07:30"),
    "latest": os.getenv("CHECKIN_LATEST", "09:00"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Insert missing default forms before serving requests
AUTO_SEED_CATALOG = bool(int(os.getenv("AUTO_SEED_CATALOG", "1")))
