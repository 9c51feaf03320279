"""Example: drive the use cases directly, without Flask.

Reconciles one subject over the last week and prints the day totals.
"""

import importlib
import json
import sys
from datetime import timedelta

from config import get_settings_module

from src.ojt_attendance.ojt_attendance.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, timezone=settings.TIMEZONE)

    subject_id = int(sys.argv[1]) if len(sys.argv) > 1 else 1
    end = container.reconciliation_service.today()
    start = end - timedelta(days=6)

    for day in container.reconciliation_service.reconcile([subject_id], start, end):
        print(json.dumps({
            "date": day.work_date.isoformat(),
            "tracked": day.to_dict()["tracked_display"],
            "validated": day.to_dict()["validated_display"],
            "late": [slot.value for slot in day.late_slots],
        }))


if __name__ == "__main__":
    main()
