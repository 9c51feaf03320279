from __future__ import annotations

from flask import Flask, jsonify

from ..common.http_utils import error_response, json_body
from ..core.enums import ReviewDecision
from ..core.exceptions import ValidationError
from ..punches.model import parse_event_ref
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/review", methods=["POST"], endpoint="api_review")
    def api_review():
        """Approve or reject punches; each id succeeds or fails on its own."""
        try:
            data = json_body()
            raw_ids = data.get("event_ids")
            if not isinstance(raw_ids, list) or not raw_ids:
                raise ValidationError("event_ids must be a non-empty list")
            try:
                decision = ReviewDecision(str(data.get("decision") or "").strip().lower())
            except ValueError:
                raise ValidationError("decision must be 'approve' or 'reject'")

            parsed = []
            for raw in raw_ids:
                try:
                    parsed.append((raw, parse_event_ref(raw), None))
                except ValidationError as e:
                    parsed.append((raw, None, str(e)))

            refs = [ref for _, ref, _ in parsed if ref is not None]
            outcomes = container.review_service.apply_review(refs, decision, data.get("reviewer_id"))
            by_ref = {o.ref: o for o in outcomes}

            results, reported = [], set()
            for raw, ref, error in parsed:
                if ref is None:
                    results.append({"id": raw, "ok": False, "error": error})
                elif ref not in reported:
                    reported.add(ref)
                    results.append(by_ref[ref].to_dict())
            return jsonify({
                "success": all(r["ok"] for r in results),
                "results": results,
            }), 200
        except Exception as e:
            return error_response(e)
