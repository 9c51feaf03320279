from __future__ import annotations

from flask import Flask, jsonify

from ..common.http_utils import error_response, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/punches", methods=["POST"], endpoint="api_record_punch")
    def api_record_punch():
        try:
            data = json_body()
            event = container.punch_service.record_punch(
                subject_id=data.get("subject_id"),
                kind=data.get("kind"),
                occurred_at_ms=data.get("occurred_at"),
                evidence_ref=data.get("evidence_ref"),
            )
            return jsonify({"success": True, "punch": event.to_dict()}), 201
        except Exception as e:
            return error_response(e)

    @app.route("/api/punches/<int:event_id>", methods=["GET"], endpoint="api_get_punch")
    def api_get_punch(event_id: int):
        try:
            event = container.punch_service.get_punch(event_id)
            return jsonify({"success": True, "punch": event.to_dict()}), 200
        except Exception as e:
            return error_response(e)
