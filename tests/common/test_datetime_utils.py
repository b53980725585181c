from __future__ import annotations

from datetime import date, datetime, time, timezone

import pytest

from src.hr_operations.hr_operations.common.datetime_utils import (
    Clock,
    day_of_week,
    from_utc_naive,
    get_zone,
    local_date,
    parse_hhmm,
    parse_iso_date,
    parse_timestamp,
    to_utc_naive,
)
from src.hr_operations.hr_operations.core.exceptions import ValidationError

from tests.fakes import JAKARTA


def test_parse_hhmm():
    assert parse_hhmm("00:00") == time(0, 0)
    assert parse_hhmm(" 23:59 ") == time(23, 59)
    for bad in ("24:00", "9:00", "12:60", "noon", ""):
        with pytest.raises(ValidationError):
            parse_hhmm(bad, "start_time")


def test_parse_iso_date():
    assert parse_iso_date("2024-01-15") == date(2024, 1, 15)
    with pytest.raises(ValidationError):
        parse_iso_date("15/01/2024")


def test_parse_timestamp_accepts_z_and_naive_local():
    utc = parse_timestamp("2024-01-10T01:00:00Z", JAKARTA)
    assert utc == datetime(2024, 1, 10, 8, 0, tzinfo=JAKARTA)

    naive = parse_timestamp("2024-01-10T08:00:00", JAKARTA)
    assert naive.tzinfo is JAKARTA
    assert parse_timestamp("", JAKARTA) is None
    with pytest.raises(ValidationError):
        parse_timestamp("yesterday", JAKARTA)


def test_local_date_uses_org_zone():
    late_utc = datetime(2024, 1, 14, 18, 30, tzinfo=timezone.utc)
    assert local_date(late_utc, JAKARTA) == date(2024, 1, 15)


def test_storage_round_trip_is_utc():
    local = datetime(2024, 1, 10, 8, 0, tzinfo=JAKARTA)
    stored = to_utc_naive(local, JAKARTA)
    assert stored == datetime(2024, 1, 10, 1, 0)
    assert from_utc_naive(stored) == local


def test_day_of_week_sunday_is_zero():
    assert day_of_week(date(2024, 1, 14)) == 0
    assert day_of_week(date(2024, 1, 20)) == 6


def test_unknown_zone_falls_back():
    assert get_zone("Mars/Olympus_Mons").key == "Asia/Jakarta"


def test_default_clock_uses_org_zone():
    assert Clock().tz.key == "Asia/Jakarta"
    assert get_zone().key == "Asia/Jakarta"
    assert Clock().now().tzinfo is not None
