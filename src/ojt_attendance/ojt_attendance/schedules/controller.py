from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http_utils import error_response, json_body, optional_subject, window_field
from ..common.validators import require_date
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schedules", methods=["PUT"], endpoint="api_set_schedule")
    def api_set_schedule():
        """Save the default schedule (no subject_id) or one subject's schedule."""
        try:
            data = json_body()
            schedule = container.schedule_service.set_schedule(
                subject_id=optional_subject(data.get("subject_id")),
                morning=window_field(data, "morning"),
                afternoon=window_field(data, "afternoon"),
                overtime=window_field(data, "overtime"),
            )
            return jsonify({"success": True, "schedule": schedule.to_dict()}), 200
        except Exception as e:
            return error_response(e)

    @app.route("/api/overrides", methods=["POST"], endpoint="api_set_override")
    def api_set_override():
        try:
            data = json_body()
            override = container.schedule_service.set_override(
                subject_id=optional_subject(data.get("subject_id")),
                work_date=require_date(data.get("date"), "date"),
                morning=window_field(data, "morning"),
                afternoon=window_field(data, "afternoon"),
            )
            return jsonify({"success": True, "override": override.to_dict() if override else None}), 200
        except Exception as e:
            return error_response(e)

    @app.route("/api/overrides", methods=["DELETE"], endpoint="api_delete_override")
    def api_delete_override():
        try:
            container.schedule_service.delete_override(
                subject_id=optional_subject(request.args.get("subject_id")),
                work_date=require_date(request.args.get("date"), "date"),
            )
            return jsonify({"success": True}), 200
        except Exception as e:
            return error_response(e)
