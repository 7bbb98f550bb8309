import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_payroll_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LATE_PENALTY = os.getenv("LATE_PENALTY", "5.00")
DAYS_IN_PERIOD = int(os.getenv("DAYS_IN_PERIOD", "28"))

DIRECTORY_LOOKUP_TIMEOUT_SECONDS = float(os.getenv("DIRECTORY_LOOKUP_TIMEOUT_SECONDS", "5"))
DIRECTORY_LOOKUP_WORKERS = int(os.getenv("DIRECTORY_LOOKUP_WORKERS", "8"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
