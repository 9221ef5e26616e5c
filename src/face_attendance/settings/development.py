import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Matching
DISTANCE_THRESHOLD = float(os.getenv("DISTANCE_THRESHOLD", "0.6"))
DISTANCE_METRIC = os.getenv("DISTANCE_METRIC", "euclidean")
EMBEDDING_DIMENSION = int(os.getenv("EMBEDDING_DIMENSION", "128"))

# Calendar dates for the one-event-per-day rule are taken in this zone
REFERENCE_TIMEZONE = os.getenv("REFERENCE_TIMEZONE", "UTC")

# Requires the `face` extra (face_recognition + opencv)
FACE_EXTRACTOR_ENABLED = bool(int(os.getenv("FACE_EXTRACTOR_ENABLED", "0")))
