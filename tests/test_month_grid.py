from datetime import date, datetime
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

from core.month_grid import grid_range, month_grid, move_task_to_date, visible_window
from models import ChecklistItem, ContentIdea, Task


def _task(title, start, end, day=date(2024, 3, 15), **extra):
    return Task(project_id="p1", title=title, date=day, start_time=start, end_time=end, **extra)


def _five_tasks(day):
    return [
        _task(f"t{i}", f"{8 + 2 * i:02d}:00", f"{9 + 2 * i:02d}:00", day=day)
        for i in range(5)
    ]


def test_march_2024_starts_on_sunday_before_first():
    days = grid_range(2024, 3)
    assert days[0] == date(2024, 2, 25)
    assert days[0].weekday() == 6
    assert len(days) % 7 == 0
    assert days[-1] == date(2024, 4, 6)


def test_every_month_is_whole_weeks():
    for month in range(1, 13):
        days = grid_range(2025, month)
        assert len(days) % 7 == 0
        assert date(2025, month, 1) in days
        assert all(days[i].weekday() == 6 for i in range(0, len(days), 7))


def test_cells_flag_current_month_and_today():
    cells = month_grid(2024, 3, [], now=datetime(2024, 3, 10, 12, 0))
    assert not cells[0].is_current_month
    today = [c for c in cells if c.is_today]
    assert [c.date for c in today] == [date(2024, 3, 10)]


def test_overflow_shows_three_and_more_label():
    day = date(2024, 3, 15)
    cells = month_grid(2024, 3, _five_tasks(day), now=datetime(2024, 3, 1, 0, 0))
    cell = next(c for c in cells if c.date == day)
    assert [t.title for t in cell.visible] == ["t0", "t1", "t2"]
    assert cell.more_label == "+2 more"
    assert cell.active_task_id is None


def test_active_task_is_centred_in_window():
    day = date(2024, 3, 15)
    tasks = _five_tasks(day)
    # t3 runs 14:00-15:00
    cells = month_grid(2024, 3, tasks, now=datetime(2024, 3, 15, 14, 30))
    cell = next(c for c in cells if c.date == day)
    assert cell.active_task_id == tasks[3].id
    assert [t.title for t in cell.visible] == ["t2", "t3", "t4"]
    assert cell.more_label == "+2 more"


def test_visible_window_clamps_at_edges():
    tasks = _five_tasks(date(2024, 3, 15))
    assert [t.title for t in visible_window(tasks, 0)] == ["t0", "t1", "t2"]
    assert [t.title for t in visible_window(tasks, 4)] == ["t2", "t3", "t4"]
    assert len(visible_window(tasks[:2], 1)) == 2


def test_tasks_sorted_by_start_and_all_completed():
    day = date(2024, 3, 20)
    tasks = [
        _task("late", "18:00", "19:00", day=day, completed=True),
        _task("early", "07:00", "08:00", day=day, completed=True),
    ]
    cell = next(c for c in month_grid(2024, 3, tasks) if c.date == day)
    assert [t.title for t in cell.tasks] == ["early", "late"]
    assert cell.all_completed
    empty = next(c for c in month_grid(2024, 3, tasks) if c.date == date(2024, 3, 21))
    assert not empty.all_completed


def test_drag_move_changes_only_the_date():
    task = _task(
        "Decorate",
        "10:00",
        "12:00",
        description="tree",
        checklist=[ChecklistItem(text="lights", completed=True)],
        content_ideas=[ContentIdea(type="video", text="timelapse")],
    )
    moved = move_task_to_date(task, date(2024, 3, 22))
    assert moved.date == date(2024, 3, 22)
    assert moved.model_dump(exclude={"date"}) == task.model_dump(exclude={"date"})
    assert task.date == date(2024, 3, 15)
    assert move_task_to_date(task, task.date) is task
