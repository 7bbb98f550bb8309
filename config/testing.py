import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_payroll_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

LATE_PENALTY = "5.00"
DAYS_IN_PERIOD = 28

DIRECTORY_LOOKUP_TIMEOUT_SECONDS = 1.0
DIRECTORY_LOOKUP_WORKERS = 2

AUTO_INIT_DB = False
AUTO_SEED_DB = False
