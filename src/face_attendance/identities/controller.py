from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import ValidationError
from ..extraction.base import read_embedding


def register(app: Flask, container: Container) -> None:
    @app.route("/api/identities", methods=["POST"], endpoint="api_register_identity")
    def api_register_identity():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("JSON body is required")

        embedding = read_embedding(data, container.extractor)
        identity = container.attendance_service.register(
            data.get("name", ""),
            data.get("email", ""),
            embedding,
        )
        return jsonify({"success": True, "identity": identity.summary().to_dict()}), 201

    @app.route("/api/identities", methods=["GET"], endpoint="api_list_identities")
    def api_list_identities():
        identities = container.attendance_service.list_identities()
        return jsonify([i.to_dict() for i in identities])
