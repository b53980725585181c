from datetime import datetime, timedelta

from src.hr_operations.hr_operations.attendance.calculator import (
    RoundingPolicy,
    calculate_work_duration,
    round_to_nearest,
)

from tests.fakes import JAKARTA

START = datetime(2024, 1, 15, 8, 0, tzinfo=JAKARTA)


def test_missing_punch_gives_no_duration():
    assert calculate_work_duration(START, None, RoundingPolicy()) is None
    assert calculate_work_duration(None, START, RoundingPolicy()) is None


def test_rounds_to_nearest_interval_half_up():
    assert round_to_nearest(487, 15) == 480
    assert round_to_nearest(487.5, 15) == 495
    assert round_to_nearest(488, 15) == 495


def test_rounding_can_be_disabled():
    end = START + timedelta(minutes=487)
    assert calculate_work_duration(START, end, RoundingPolicy(enabled=False)) == 487
    assert calculate_work_duration(START, end, RoundingPolicy(enabled=True, interval_minutes=15)) == 480


def test_negative_span_floors_at_zero():
    assert calculate_work_duration(START, START - timedelta(minutes=30), RoundingPolicy()) == 0
