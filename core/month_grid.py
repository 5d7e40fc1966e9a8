"""Month calendar projection: whole weeks of day cells with capped task lists."""
from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from core.settings import UI
from helpers.datetime_utils import is_task_active
from models.task import Task


@dataclass
class DayCell:
    date: date
    is_current_month: bool
    is_today: bool
    tasks: List[Task] = field(default_factory=list)
    visible: List[Task] = field(default_factory=list)
    active_task_id: Optional[str] = None

    @property
    def hidden_count(self) -> int:
        return len(self.tasks) - len(self.visible)

    @property
    def more_label(self) -> Optional[str]:
        return f"+{self.hidden_count} more" if self.hidden_count > 0 else None

    @property
    def all_completed(self) -> bool:
        return bool(self.tasks) and all(t.completed for t in self.tasks)


def week_start_of(day: date, week_start: int) -> date:
    return day - timedelta(days=(day.weekday() - week_start) % 7)


def grid_range(year: int, month: int, *, week_start: int = UI.month.week_start) -> List[date]:
    first = date(year, month, 1)
    last = date(year, month, calendar.monthrange(year, month)[1])
    start = week_start_of(first, week_start)
    end = week_start_of(last, week_start) + timedelta(days=6)
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def tasks_for_day(tasks: Iterable[Task], day: date) -> List[Task]:
    # HH:mm strings sort chronologically
    return sorted((t for t in tasks if t.date == day), key=lambda t: t.start_time)


def visible_window(
    tasks: Sequence[Task],
    active_index: Optional[int],
    *,
    max_visible: int = UI.month.max_visible,
) -> List[Task]:
    """Slice at most ``max_visible`` tasks, centring the active one if any."""

    if len(tasks) <= max_visible:
        return list(tasks)
    if active_index is None:
        return list(tasks[:max_visible])
    start = max(0, active_index - 1)
    if start + max_visible > len(tasks):
        start = max(0, len(tasks) - max_visible)
    return list(tasks[start:start + max_visible])


def month_grid(
    year: int,
    month: int,
    tasks: Iterable[Task],
    now: Optional[datetime] = None,
    *,
    week_start: int = UI.month.week_start,
    max_visible: int = UI.month.max_visible,
) -> List[DayCell]:
    now = now or datetime.now()
    today = now.date()
    all_tasks = list(tasks)
    cells: List[DayCell] = []
    for day in grid_range(year, month, week_start=week_start):
        day_tasks = tasks_for_day(all_tasks, day)
        active_index = None
        if day == today:
            active_index = next(
                (idx for idx, t in enumerate(day_tasks) if is_task_active(t, now)),
                None,
            )
        cells.append(
            DayCell(
                date=day,
                is_current_month=day.month == month,
                is_today=day == today,
                tasks=day_tasks,
                visible=visible_window(day_tasks, active_index, max_visible=max_visible),
                active_task_id=day_tasks[active_index].id if active_index is not None else None,
            )
        )
    return cells


def move_task_to_date(task: Task, new_date: date) -> Task:
    """Return ``task`` re-dated to ``new_date``; every other field is kept."""

    if task.date == new_date:
        return task
    return task.model_copy(update={"date": new_date}, deep=True)


__all__ = [
    "DayCell",
    "grid_range",
    "month_grid",
    "move_task_to_date",
    "tasks_for_day",
    "visible_window",
    "week_start_of",
]
