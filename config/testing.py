import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

DOCUMENT_UPLOAD_FOLDER = os.getenv("DOCUMENT_UPLOAD_FOLDER", "/tmp/school_attendance/justifications")
DOCUMENT_BASE_URL = "/uploads/justifications"
MAX_CONTENT_LENGTH = 6 * 1024 * 1024

DEFER_JUSTIFICATION = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
