import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "here_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

SCHOOL_TIMEZONE = "America/New_York"
CHECKIN_LEAD_MINUTES = 15
WAVE_LEAD_MINUTES = 5
DEFAULT_GEOFENCE_RADIUS_METERS = 100

AUTO_INIT_DB = False
AUTO_SEED_DB = False
