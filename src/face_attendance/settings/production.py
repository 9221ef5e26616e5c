import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "face_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

DISTANCE_THRESHOLD = float(os.getenv("DISTANCE_THRESHOLD", "0.6"))
DISTANCE_METRIC = os.getenv("DISTANCE_METRIC", "euclidean")
EMBEDDING_DIMENSION = int(os.getenv("EMBEDDING_DIMENSION", "128"))

REFERENCE_TIMEZONE = os.getenv("REFERENCE_TIMEZONE", "UTC")

FACE_EXTRACTOR_ENABLED = bool(int(os.getenv("FACE_EXTRACTOR_ENABLED", "1")))
