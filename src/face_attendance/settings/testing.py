import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

DISTANCE_THRESHOLD = 0.6
DISTANCE_METRIC = "euclidean"
EMBEDDING_DIMENSION = 3

REFERENCE_TIMEZONE = "UTC"

FACE_EXTRACTOR_ENABLED = False
