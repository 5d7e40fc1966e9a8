"""Shared utilities for parsing wall-clock times, task dates and intervals."""
from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Protocol, Tuple, Union


MINUTES_PER_DAY = 24 * 60
NOON = 12 * 60

HHMM_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class InvalidTimeError(ValueError):
    """Raised for strings that are not ``HH:mm`` 24-hour times."""


class InvalidDateError(ValueError):
    """Raised when a task date cannot be normalized to a calendar date."""


class InvalidIntervalError(ValueError):
    """Raised when a task does not start strictly before it ends."""


class SupportsInterval(Protocol):
    date: date
    start_time: str
    end_time: str


def parse_hhmm(value: str) -> int:
    """Return minutes since midnight for a strict ``HH:mm`` string."""

    match = HHMM_RE.match((value or "").strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidTimeError(f"Invalid time {value!r}, expected HH:mm")
    return int(match.group(1)) * 60 + int(match.group(2))


def format_hhmm(minutes: int) -> str:
    minutes = max(0, min(int(minutes), MINUTES_PER_DAY - 1))
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def minutes_interval(start: str, end: str) -> Tuple[int, int]:
    """Parse a same-day interval; ``start`` must be strictly before ``end``."""

    start_min = parse_hhmm(start)
    end_min = parse_hhmm(end)
    if start_min >= end_min:
        raise InvalidIntervalError(f"Start {start} must be before end {end}")
    return start_min, end_min


def snap_minutes(value: int, *, step: int, direction: str = "forward") -> int:
    """Snap ``value`` to ``step`` minutes using the provided ``direction``.

    ``direction`` can be ``forward`` (ceil), ``nearest`` or ``backward``.
    """

    if step <= 0:
        return value
    if direction == "nearest":
        return int(round(value / step) * step)
    remainder = value % step
    if remainder == 0:
        return value
    if direction == "backward":
        return value - remainder
    return value + (step - remainder)


def parse_date_input(value: Union[str, date, datetime, None]) -> Optional[date]:
    """Parse ISO ``YYYY-MM-DD``, full ISO date-times or ``DD.MM.YYYY``.

    Date-times sent by the backend (``2024-12-05T00:00:00.000Z``) keep their
    calendar part; no timezone shifting is applied.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None

    for fmt in ("%Y-%m-%d", "%d.%m.%Y"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    if len(text) > 10 and text[10] in "T ":
        head = text[:10]
        try:
            parsed = datetime.strptime(head, "%Y-%m-%d").date()
        except ValueError:
            return None
        tail = text[11:]
        if tail.endswith("Z"):
            tail = tail[:-1]
        try:
            datetime.fromisoformat(f"{head}T{tail}")
        except ValueError:
            return None
        return parsed
    return None


def normalize_task_date(value: Union[str, date, datetime, None]) -> date:
    parsed = parse_date_input(value)
    if parsed is None:
        raise InvalidDateError(f"Invalid task date {value!r}")
    return parsed


def parse_time_input(value: str | None, *, allow_relative: bool = True) -> Optional[time]:
    """Parse form input such as ``09:30``, ``9.30``, ``930`` or ``now+30``."""

    if not value:
        return None
    text = value.strip().lower()
    if not text:
        return None

    if allow_relative and text.startswith("now"):
        parts = text.split("+", 1)
        try:
            minutes = int(parts[1]) if len(parts) == 2 else 0
        except ValueError:
            return None
        base = datetime.now().replace(second=0, microsecond=0) + timedelta(minutes=max(minutes, 0))
        return time(base.hour, base.minute)

    for fmt in ("%H:%M", "%H.%M"):
        try:
            dt = datetime.strptime(text, fmt)
            return time(dt.hour, dt.minute)
        except ValueError:
            continue

    if len(text) in {3, 4} and text.isdigit():
        hours, minutes = int(text[:-2]), int(text[-2:])
        if 0 <= hours <= 23 and 0 <= minutes <= 59:
            return time(hours, minutes)
    return None


def clock_angle(minutes: int) -> float:
    """Angle on a 12-hour dial, 0° at twelve o'clock, growing clockwise."""

    hour, minute = divmod(int(minutes), 60)
    return (hour % 12) * 30 + minute * 0.5


def interval_contains(start: datetime, end: datetime, instant: datetime) -> bool:
    return start <= instant < end


def task_bounds(task: SupportsInterval) -> Tuple[datetime, datetime]:
    start_min, end_min = minutes_interval(task.start_time, task.end_time)
    midnight = datetime.combine(task.date, time.min)
    return midnight + timedelta(minutes=start_min), midnight + timedelta(minutes=end_min)


def is_task_active(task: SupportsInterval, now: datetime) -> bool:
    """True while ``now`` falls inside the task's ``[start, end)`` window."""

    start, end = task_bounds(task)
    return interval_contains(start, end, now.replace(tzinfo=None))


def next_slot(now: datetime, *, step: int, duration: int) -> Tuple[str, str]:
    """Suggest the next ``step``-aligned start/end pair for a new task."""

    minutes = snap_minutes(now.hour * 60 + now.minute + 1, step=step, direction="forward")
    start = min(minutes, MINUTES_PER_DAY - step)
    end = min(start + duration, MINUTES_PER_DAY - 1)
    return format_hhmm(start), format_hhmm(end)


__all__ = [
    "HHMM_RE",
    "InvalidDateError",
    "InvalidIntervalError",
    "InvalidTimeError",
    "MINUTES_PER_DAY",
    "NOON",
    "clock_angle",
    "format_hhmm",
    "interval_contains",
    "is_task_active",
    "minutes_interval",
    "next_slot",
    "normalize_task_date",
    "parse_date_input",
    "parse_hhmm",
    "parse_time_input",
    "snap_minutes",
    "task_bounds",
]
