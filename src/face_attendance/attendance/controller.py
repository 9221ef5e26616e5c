from __future__ import annotations

from flask import Flask, Response, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.exceptions import ValidationError
from ..extraction.base import read_embedding


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    def _json_body() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("JSON body is required")
        return data

    def _filtered_events():
        name = request.args.get("name") or None
        raw_date = request.args.get("date") or None
        try:
            on_date = parse_iso_date(raw_date) if raw_date else None
        except ValueError as exc:
            raise ValidationError("date must be YYYY-MM-DD") from exc
        return container.report_service.filter_events(svc.list_attendance(), name_query=name, on_date=on_date)

    @app.route("/api/recognize", methods=["POST"], endpoint="api_recognize")
    def api_recognize():
        embedding = read_embedding(_json_body(), container.extractor)
        result = svc.recognize(embedding)
        identity = None if result.is_unknown else svc.find_identity(result.label)
        return jsonify(
            {
                **result.to_dict(),
                "identity": identity.summary().to_dict() if identity else None,
            }
        )

    @app.route("/api/attendance/recognize-and-mark", methods=["POST"], endpoint="api_recognize_and_mark")
    def api_recognize_and_mark():
        embedding = read_embedding(_json_body(), container.extractor)
        outcome = svc.recognize_and_mark(embedding)
        return jsonify(outcome.to_dict())

    @app.route("/api/attendance/status/<identity_id>", methods=["GET"], endpoint="api_attendance_status")
    def api_attendance_status(identity_id: str):
        return jsonify(svc.check_status(identity_id).to_dict())

    @app.route("/api/attendance/<identity_id>/mark", methods=["POST"], endpoint="api_mark_attendance")
    def api_mark_attendance(identity_id: str):
        event, already = svc.record_attendance(identity_id)
        return jsonify({"success": True, "alreadyMarked": already, "event": event.to_dict()}), (200 if already else 201)

    @app.route("/api/attendance", methods=["GET"], endpoint="api_list_attendance")
    def api_list_attendance():
        return jsonify([e.to_dict() for e in _filtered_events()])

    @app.route("/api/attendance/report.csv", methods=["GET"], endpoint="api_attendance_report_csv")
    def api_attendance_report_csv():
        report = container.report_service
        csv_bytes = report.export_csv(_filtered_events()).encode("utf-8-sig")
        filename = report.report_filename(svc.today())
        return Response(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
