from __future__ import annotations

import importlib
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.exceptions import DomainError, IdentityNotFound, StorageUnavailable, ValidationError
from .core.logging_config import get_logger, setup_logging
from .database.bootstrap import apply_schema, list_tables
from .identities.controller import register as register_identities
from .settings import get_settings_module

logger = get_logger(__name__)


def _build_extractor(settings):
    if not bool(getattr(settings, "FACE_EXTRACTOR_ENABLED", False)):
        return None
    # Requires the `face` extra.
    from .extraction.face_encoder import FaceRecognitionExtractor

    return FaceRecognitionExtractor()


def _register_error_handlers(app: Flask) -> None:
    def _error(message: str, status: int):
        return jsonify({"success": False, "message": message}), status

    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return _error(str(e), 400)

    @app.errorhandler(IdentityNotFound)
    def handle_not_found(e: IdentityNotFound):
        return _error(str(e), 404)

    @app.errorhandler(StorageUnavailable)
    def handle_storage(e: StorageUnavailable):
        logger.error(f"Storage unavailable: {e}")
        return _error("Storage unavailable", 503)

    @app.errorhandler(DomainError)
    def handle_domain(e: DomainError):
        return _error(str(e), 400)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            f"settings={settings_module} "
            f"db={db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info(f"Schema ready (tables={len(list_tables(db_config))})")

        container = build_container(db_config=db_config, settings=settings, extractor=_build_extractor(settings))

    app.extensions["face_attendance"] = container

    _register_error_handlers(app)
    register_identities(app, container)
    register_attendance(app, container)

    @app.route("/health")
    def health():
        return jsonify({"status": "ok", "extractor": container.extractor is not None})

    return app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=app.config["DEBUG"])


if __name__ == "__main__":
    main()
