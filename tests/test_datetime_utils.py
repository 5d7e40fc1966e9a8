from datetime import date, datetime, time, timedelta
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from helpers.datetime_utils import (
    InvalidDateError,
    InvalidIntervalError,
    InvalidTimeError,
    clock_angle,
    format_hhmm,
    is_task_active,
    minutes_interval,
    next_slot,
    normalize_task_date,
    parse_date_input,
    parse_hhmm,
    parse_time_input,
    snap_minutes,
)
from models.task import Task


def _task(start="09:00", end="10:00", day=date(2024, 12, 5)):
    return Task(project_id="p1", title="t", date=day, start_time=start, end_time=end)


def test_parse_date_input_iso_and_dotted():
    assert parse_date_input("2023-12-01").isoformat() == "2023-12-01"
    assert parse_date_input("01.12.2023").isoformat() == "2023-12-01"


def test_parse_date_input_keeps_calendar_part_of_datetimes():
    assert parse_date_input("2024-12-05T00:00:00.000Z") == date(2024, 12, 5)
    assert parse_date_input("2024-12-05T23:30:00+05:00") == date(2024, 12, 5)
    assert parse_date_input(datetime(2024, 12, 5, 22, 0)) == date(2024, 12, 5)


def test_normalize_task_date_rejects_garbage():
    with pytest.raises(InvalidDateError):
        normalize_task_date("tomorrow-ish")
    with pytest.raises(InvalidDateError):
        normalize_task_date("2024-13-40")


def test_parse_hhmm_is_strict():
    assert parse_hhmm("00:00") == 0
    assert parse_hhmm("23:59") == 23 * 60 + 59
    for bad in ("24:00", "9:00", "12:60", "", None):
        with pytest.raises(InvalidTimeError):
            parse_hhmm(bad)


def test_minutes_interval_rejects_empty_and_reversed():
    assert minutes_interval("11:00", "13:00") == (660, 780)
    with pytest.raises(InvalidIntervalError):
        minutes_interval("10:00", "10:00")
    with pytest.raises(InvalidIntervalError):
        minutes_interval("22:00", "01:00")


def test_format_hhmm_clamps():
    assert format_hhmm(0) == "00:00"
    assert format_hhmm(615) == "10:15"
    assert format_hhmm(5000) == "23:59"


def test_parse_time_input_formats():
    assert parse_time_input("09:30") == time(9, 30)
    assert parse_time_input("9.30") == time(9, 30)
    assert parse_time_input("930") == time(9, 30)
    assert parse_time_input("2561") is None
    assert parse_time_input("") is None


def test_parse_time_input_relative_now():
    before = datetime.now()
    result = parse_time_input("now+30")
    assert result is not None
    expected = before + timedelta(minutes=30)
    minutes_expected = expected.hour * 60 + expected.minute
    minutes_actual = result.hour * 60 + result.minute
    # allow a 1-minute drift due to processing time
    assert abs(minutes_actual - minutes_expected) <= 1 or abs(minutes_actual - minutes_expected + 24 * 60) <= 1


def test_snap_minutes_rounding():
    assert snap_minutes(17, step=15, direction="nearest") == 15
    assert snap_minutes(8, step=15, direction="forward") == 15
    assert snap_minutes(22, step=15, direction="backward") == 15


def test_clock_angle():
    assert clock_angle(0) == 0
    assert clock_angle(12 * 60) == 0
    assert clock_angle(3 * 60) == 90
    assert clock_angle(13 * 60 + 30) == 45
    assert clock_angle(11 * 60 + 59) == pytest.approx(359.5)


def test_task_active_window_is_half_open():
    task = _task("09:00", "10:00")
    assert not is_task_active(task, datetime(2024, 12, 5, 8, 59))
    assert is_task_active(task, datetime(2024, 12, 5, 9, 0))
    assert is_task_active(task, datetime(2024, 12, 5, 9, 59))
    assert not is_task_active(task, datetime(2024, 12, 5, 10, 0))
    assert not is_task_active(task, datetime(2024, 12, 6, 9, 30))


def test_next_slot_aligns_to_step():
    assert next_slot(datetime(2024, 1, 1, 9, 7), step=15, duration=60) == ("09:15", "10:15")
    assert next_slot(datetime(2024, 1, 1, 9, 15), step=15, duration=60) == ("09:30", "10:30")
    start, end = next_slot(datetime(2024, 1, 1, 23, 50), step=15, duration=60)
    assert parse_hhmm(start) < parse_hhmm(end)
