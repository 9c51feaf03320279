from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import from_epoch_ms
from ..common.http_utils import date_arg, error_response, json_body, parse_subject_ids
from ..common.validators import require_date, require_epoch_ms
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _instant(data: dict, name: str):
        return from_epoch_ms(require_epoch_ms(data.get(name), name), container.tz)

    @app.route("/api/overtime", methods=["GET"], endpoint="api_list_overtime")
    def api_list_overtime():
        try:
            today = container.reconciliation_service.today()
            grants = container.overtime_service.list_grants(
                start=date_arg("start", default=today),
                end=date_arg("end", default=today),
                subject_ids=parse_subject_ids(request.args.get("subject_ids")) or None,
            )
            return jsonify({"success": True, "grants": [g.to_dict() for g in grants]}), 200
        except Exception as e:
            return error_response(e)

    @app.route("/api/overtime", methods=["POST"], endpoint="api_grant_overtime")
    def api_grant_overtime():
        try:
            data = json_body()
            grant = container.overtime_service.grant(
                subject_id=data.get("subject_id"),
                work_date=require_date(data.get("date"), "date"),
                start=_instant(data, "start"),
                end=_instant(data, "end"),
                created_by=data.get("created_by"),
            )
            return jsonify({"success": True, "grant": grant.to_dict()}), 201
        except Exception as e:
            return error_response(e)

    @app.route("/api/overtime", methods=["PUT"], endpoint="api_revise_overtime")
    def api_revise_overtime():
        try:
            data = json_body()
            grant = container.overtime_service.revise(
                subject_id=data.get("subject_id"),
                work_date=require_date(data.get("date"), "date"),
                start=_instant(data, "start"),
                end=_instant(data, "end"),
            )
            return jsonify({"success": True, "grant": grant.to_dict()}), 200
        except Exception as e:
            return error_response(e)

    @app.route("/api/overtime", methods=["DELETE"], endpoint="api_revoke_overtime")
    def api_revoke_overtime():
        try:
            container.overtime_service.revoke(
                subject_id=request.args.get("subject_id"),
                work_date=require_date(request.args.get("date"), "date"),
            )
            return jsonify({"success": True}), 200
        except Exception as e:
            return error_response(e)
