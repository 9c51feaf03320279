from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional

from flask import jsonify, request

from ..core.exceptions import DomainError, NotFoundError, TransitionError, ValidationError
from ..schedules.model import TimeWindow
from .validators import optional_time, require_date

logger = logging.getLogger(__name__)


def error_response(error: Exception):
    """JSON error body and status code for an exception raised by a use case."""
    if isinstance(error, ValidationError):
        status = 400
    elif isinstance(error, NotFoundError):
        status = 404
    elif isinstance(error, TransitionError):
        status = 409
    elif isinstance(error, DomainError):
        status = 400
    else:
        logger.exception("Unhandled error on %s %s", request.method, request.path, exc_info=error)
        return jsonify({"success": False, "message": "Internal server error"}), 500
    return jsonify({"success": False, "message": str(error)}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def parse_subject_ids(raw: Any) -> list[int]:
    """Accept "1,2,3", a list of ids, or a single id."""
    if raw is None or raw == "":
        return []
    if isinstance(raw, (list, tuple)):
        items = list(raw)
    else:
        items = [part for part in str(raw).split(",") if part.strip()]
    ids = []
    for item in items:
        try:
            ids.append(int(str(item).strip()))
        except ValueError:
            raise ValidationError(f"Invalid subject id: {item!r}")
    return ids


def optional_subject(raw: Any) -> Optional[int]:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid subject id: {raw!r}")


def date_arg(name: str, default: Optional[date] = None) -> date:
    raw = request.args.get(name)
    if not raw:
        if default is None:
            raise ValidationError(f"{name} is required")
        return default
    return require_date(raw, name)


def window_field(data: dict, name: str) -> Optional[TimeWindow]:
    """Read an optional {"start": "HH:MM", "end": "HH:MM"} object from a request body."""
    raw = data.get(name)
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValidationError(f"{name} must be an object with start and end")
    start = optional_time(raw.get("start"), f"{name}.start")
    end = optional_time(raw.get("end"), f"{name}.end")
    if start is None or end is None:
        raise ValidationError(f"{name} needs both start and end")
    return TimeWindow(start=start, end=end)
