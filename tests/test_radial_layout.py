from datetime import date, datetime
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from core.palette import DIAL_FALLBACK_COLOR
from core.radial import (
    AM,
    PM,
    clock_hand,
    default_selection,
    hit_test,
    layout_day,
    polar_to_cartesian,
    ring_fills,
    split_interval,
)
from core.settings import DIAL
from models import ChecklistItem, Project, Task

DAY = date(2024, 12, 5)
PROJECT = Project(id="p1", name="Holiday Baking", color="#ef4444")


def _task(start, end, *, title="t", project_id="p1", day=DAY, **extra):
    return Task(project_id=project_id, title=title, date=day, start_time=start, end_time=end, **extra)


def _point(radius, angle):
    return polar_to_cartesian(DIAL.center, DIAL.center, radius, angle)


def test_noon_crossing_task_splits_into_two_rings():
    task = _task("11:00", "13:00")
    segments = layout_day([task], [PROJECT], DAY, datetime(2024, 12, 5, 8, 0))
    assert len(segments) == 2
    assert {s.ring for s in segments} == {AM, PM}
    assert {s.task_id for s in segments} == {task.id}
    assert sum(s.duration for s in segments) == 120

    am = next(s for s in segments if s.ring == AM)
    pm = next(s for s in segments if s.ring == PM)
    assert (am.arc.start_angle, am.arc.end_angle) == (330, 360)
    assert (pm.arc.start_angle, pm.arc.end_angle) == (0, 30)
    assert am.arc.radius == DIAL.radius_am
    assert pm.arc.radius == DIAL.radius_pm


def test_split_interval_edges():
    assert split_interval(540, 720) == [(AM, 540, 720)]
    assert split_interval(720, 780) == [(PM, 720, 780)]
    assert split_interval(0, 1439) == [(AM, 0, 720), (PM, 720, 1439)]


def test_segments_drawn_longest_first():
    short = _task("09:00", "09:30", title="short")
    long_ = _task("08:00", "09:30", title="long")
    mid = _task("08:30", "09:30", title="mid")
    segments = layout_day([short, long_, mid], [PROJECT], DAY, datetime(2024, 12, 5, 0, 0))
    assert [s.duration for s in segments] == [90, 60, 30]
    assert [s.task.title for s in segments] == ["long", "mid", "short"]


def test_shorter_overlapping_arc_wins_hit_test():
    short = _task("09:00", "09:30", title="short")
    long_ = _task("08:00", "09:30", title="long")
    mid = _task("08:30", "09:30", title="mid")
    segments = layout_day([long_, mid, short], [PROJECT], DAY, datetime(2024, 12, 5, 0, 0))

    # 09:15 sits under all three arcs
    x, y = _point(DIAL.radius_am, 277.5)
    assert hit_test(segments, x, y).task.title == "short"
    # 08:45 only under long and mid
    x, y = _point(DIAL.radius_am, 262.5)
    assert hit_test(segments, x, y).task.title == "mid"
    # 08:15 only under long
    x, y = _point(DIAL.radius_am, 247.5)
    assert hit_test(segments, x, y).task.title == "long"


def test_hit_test_misses_outside_rings_and_gaps():
    segments = layout_day([_task("09:00", "10:00")], [PROJECT], DAY, datetime(2024, 12, 5, 0, 0))
    assert hit_test(segments, DIAL.center, DIAL.center) is None
    x, y = _point(DIAL.radius_pm, 285)  # 21:30 on the PM ring
    assert hit_test(segments, x, y) is None
    x, y = _point(DIAL.radius_am + DIAL.stroke_width, 285)
    assert hit_test(segments, x, y) is None


def test_hit_test_across_twelve_oclock():
    task = _task("11:30", "12:00")
    segments = layout_day([task], [PROJECT], DAY, datetime(2024, 12, 5, 0, 0))
    assert segments[0].arc.end_angle == 360
    x, y = _point(DIAL.radius_am, 350)
    assert hit_test(segments, x, y).task_id == task.id


@pytest.mark.parametrize("end", ["12:00", "14:00"])
def test_morning_from_midnight_fills_whole_ring(end):
    task = _task("00:00", end)
    segments = layout_day([task], [PROJECT], DAY, datetime(2024, 12, 5, 0, 0))
    am = next(s for s in segments if s.ring == AM)
    assert (am.arc.start_angle, am.arc.end_angle) == (0, 360)
    assert am.arc.sweep_degrees == 360
    assert am.duration == 720

    x, y = _point(DIAL.radius_am, 90)
    assert hit_test(segments, x, y).task_id == task.id
    assert am.arc.to_svg().count(" A ") == 2


def test_segment_colour_alpha_and_fallback():
    done = _task("09:00", "10:00", completed=True)
    orphan = _task("14:00", "15:00", project_id="gone")
    partial = _task(
        "16:00", "18:00",
        checklist=[ChecklistItem(text="a", completed=True), ChecklistItem(text="b")],
    )
    segments = {s.task_id: s for s in layout_day([done, orphan, partial], [PROJECT], DAY, datetime(2024, 12, 5, 0, 0))}
    assert segments[done.id].color == "#ef4444"
    assert segments[done.id].alpha == pytest.approx(1.0)
    assert segments[orphan.id].color == DIAL_FALLBACK_COLOR
    assert segments[orphan.id].alpha == pytest.approx(0.15)
    assert segments[partial.id].alpha == pytest.approx(0.575)


def test_other_days_are_ignored_and_active_flag_set():
    today = _task("09:00", "10:00")
    other = _task("09:00", "10:00", day=date(2024, 12, 6))
    segments = layout_day([today, other], [PROJECT], DAY, datetime(2024, 12, 5, 9, 30))
    assert [s.task_id for s in segments] == [today.id]
    assert segments[0].is_active


def test_svg_arc_path():
    segments = layout_day([_task("03:00", "06:00")], [PROJECT], DAY, datetime(2024, 12, 5, 0, 0))
    c = DIAL.center
    r = DIAL.radius_am
    assert segments[0].arc.to_svg() == f"M {c:g} {c + r:g} A {r} {r} 0 0 0 {c + r:g} {c:g}"
    long_arc = layout_day([_task("00:00", "09:00")], [PROJECT], DAY, datetime(2024, 12, 5, 0, 0))[0]
    assert long_arc.arc.large_arc


def test_default_selection_policy():
    first = _task("09:00", "10:00")
    second = _task("10:00", "11:00")
    tasks = [first, second]
    now = datetime(2024, 12, 5, 10, 15)
    assert default_selection(tasks, DAY, now) == second.id
    assert default_selection(tasks, DAY, now, current=first.id) == first.id
    assert default_selection(tasks, DAY, now, current="stale") == second.id
    # no fallback to the first task on other days or idle hours
    assert default_selection(tasks, date(2024, 12, 6), now) is None
    assert default_selection(tasks, DAY, datetime(2024, 12, 5, 13, 0)) is None


def test_clock_hand_and_ring_fills():
    hand = clock_hand(datetime(2024, 12, 5, 15, 30))
    assert hand.angle == 105
    assert hand.is_pm
    fills = ring_fills(datetime(2024, 12, 5, 15, 30))
    assert fills[PM] > fills[AM]
    fills = ring_fills(datetime(2024, 12, 5, 9, 0))
    assert fills[AM] == DIAL.ring_alpha_active
