import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Justification documents are written here and served under DOCUMENT_BASE_URL
DOCUMENT_UPLOAD_FOLDER = os.getenv("DOCUMENT_UPLOAD_FOLDER", "uploads/justifications")
DOCUMENT_BASE_URL = os.getenv("DOCUMENT_BASE_URL", "/uploads/justifications")
# Slightly above the 5MB document limit so oversized files get a domain error, not a 413
MAX_CONTENT_LENGTH = 6 * 1024 * 1024

# Allow a status that needs a justification the actor cannot add; a reviewer justifies it later
DEFER_JUSTIFICATION = bool(int(os.getenv("DEFER_JUSTIFICATION", "1")))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
