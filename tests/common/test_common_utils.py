from __future__ import annotations

import threading
import time as clock
from datetime import date, datetime, time, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

from src.ojt_attendance.ojt_attendance.common.datetime_utils import (
    elapsed,
    format_minutes,
    from_epoch_ms,
    iter_dates,
    parse_time_of_day,
    to_epoch_ms,
)
from src.ojt_attendance.ojt_attendance.common.locks import KeyedLocks
from src.ojt_attendance.ojt_attendance.database.bootstrap import _strip_create_db_and_use, iter_sql_statements

from tests.fakes import TZ, at

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("08:00", time(8, 0)),
        ("8:05:30", time(8, 5, 30)),
        ("12:30 AM", time(0, 30)),
        ("12:15 pm", time(12, 15)),
        ("5:00 PM", time(17, 0)),
    ],
)
def test_parse_time_of_day(raw, expected):
    assert parse_time_of_day(raw) == expected


@pytest.mark.parametrize("raw", ["", "noon", "13:00 PM", "25"])
def test_parse_time_of_day_rejects_garbage(raw):
    with pytest.raises(ValueError):
        parse_time_of_day(raw)


def test_epoch_millis_round_trip_in_configured_zone():
    moment = at(date(2025, 3, 10), 8, 0)
    ms = to_epoch_ms(moment)

    assert ms == 1741564800000
    assert from_epoch_ms(ms, TZ) == moment
    assert from_epoch_ms(ms, TZ).utcoffset().total_seconds() == 8 * 3600


def test_format_minutes_and_date_iteration():
    assert format_minutes(485) == "8:05"
    assert list(iter_dates(date(2025, 2, 27), date(2025, 3, 1))) == [
        date(2025, 2, 27),
        date(2025, 2, 28),
        date(2025, 3, 1),
    ]


def test_elapsed_spans_a_dst_change():
    ny = ZoneInfo("America/New_York")
    start = datetime(2025, 11, 2, 0, 30, tzinfo=ny)
    end = datetime(2025, 11, 2, 3, 30, tzinfo=ny)
    assert elapsed(start, end) == timedelta(hours=4)


def test_keyed_locks_serialise_the_same_key_only():
    locks = KeyedLocks()
    active = {"a": 0, "max_a": 0}
    guard = threading.Lock()

    def work(key):
        with locks.hold(key):
            with guard:
                active[key] = active.get(key, 0) + 1
                active["max_" + key] = max(active.get("max_" + key, 0), active[key])
            clock.sleep(0.01)
            with guard:
                active[key] -= 1

    threads = [threading.Thread(target=work, args=("a",)) for _ in range(5)]
    threads += [threading.Thread(target=work, args=("b",)) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert active["max_a"] == 1
    assert active["max_b"] == 1


def test_schema_script_splits_into_create_statements():
    sql = _strip_create_db_and_use("CREATE DATABASE x;\nUSE x;\n" + SCHEMA.read_text(encoding="utf-8"))
    statements = list(iter_sql_statements(sql))

    assert len(statements) == 4
    assert all(s.upper().startswith("CREATE TABLE IF NOT EXISTS") for s in statements)
