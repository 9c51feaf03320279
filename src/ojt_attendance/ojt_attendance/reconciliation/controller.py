from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, request

from ..common.http_utils import date_arg, error_response, parse_subject_ids
from ..core.constants import DEFAULT_REPORT_DAYS
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _range():
        end = date_arg("end", default=container.reconciliation_service.today())
        start = date_arg("start", default=end - timedelta(days=DEFAULT_REPORT_DAYS - 1))
        return start, end

    @app.route("/api/reconcile", methods=["GET"], endpoint="api_reconcile")
    def api_reconcile():
        try:
            start, end = _range()
            subject_ids = parse_subject_ids(request.args.get("subject_ids"))
            days = container.reconciliation_service.reconcile(subject_ids, start, end)
            return jsonify({"success": True, "days": [d.to_dict() for d in days]}), 200
        except Exception as e:
            return error_response(e)

    @app.route("/api/reconcile/summary", methods=["GET"], endpoint="api_reconcile_summary")
    def api_reconcile_summary():
        try:
            start, end = _range()
            subject_ids = parse_subject_ids(request.args.get("subject_ids"))
            summaries = container.reconciliation_service.summarize_range(subject_ids, start, end)
            return jsonify({"success": True, "subjects": [s.to_dict() for s in summaries]}), 200
        except Exception as e:
            return error_response(e)
