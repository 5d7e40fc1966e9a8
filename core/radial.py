"""Two-ring clock dial layout for a single day.

Tasks become clockwise arcs: the inner ring covers 00:00-12:00 and the outer
ring 12:00-24:00.  A task crossing noon becomes two segments that share the
task id.  The returned list is in draw order (longest first) so that short
arcs end up on top and win hit tests.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core.palette import DIAL_FALLBACK_COLOR
from core.scoring import progress_alpha, task_progress
from core.settings import DIAL, DialSettings
from helpers.datetime_utils import NOON, clock_angle, is_task_active, minutes_interval
from models.project import Project
from models.task import Task


AM = "am"
PM = "pm"


@dataclass(frozen=True)
class ArcPath:
    cx: float
    cy: float
    radius: float
    start_angle: float
    end_angle: float
    sweep: str = "clockwise"

    @property
    def sweep_degrees(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def large_arc(self) -> bool:
        return self.sweep_degrees > 180

    def point_at(self, angle: float) -> Tuple[float, float]:
        return polar_to_cartesian(self.cx, self.cy, self.radius, angle)

    def to_svg(self) -> str:
        # Drawn from the end point back to the start with sweep-flag 0, which
        # traces the clockwise arc from start to end.
        sx, sy = self.point_at(self.end_angle)
        ex, ey = self.point_at(self.start_angle)
        r = _fmt(self.radius)
        if self.sweep_degrees >= 360:
            # a closed circle needs two half arcs, SVG drops an arc whose ends coincide
            mx, my = self.point_at(self.start_angle + 180)
            return (
                f"M {_fmt(sx)} {_fmt(sy)} A {r} {r} 0 0 0 {_fmt(mx)} {_fmt(my)} "
                f"A {r} {r} 0 0 0 {_fmt(ex)} {_fmt(ey)}"
            )
        flag = 1 if self.large_arc else 0
        return f"M {_fmt(sx)} {_fmt(sy)} A {r} {r} 0 {flag} 0 {_fmt(ex)} {_fmt(ey)}"


@dataclass(frozen=True)
class Segment:
    task_id: str
    task: Task
    ring: str
    start_minute: int
    end_minute: int
    arc: ArcPath
    color: str
    alpha: float
    is_active: bool

    @property
    def duration(self) -> int:
        return self.end_minute - self.start_minute

    @property
    def is_pm(self) -> bool:
        return self.ring == PM


@dataclass(frozen=True)
class ClockHand:
    angle: float
    is_pm: bool


def _fmt(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def polar_to_cartesian(cx: float, cy: float, radius: float, angle: float) -> Tuple[float, float]:
    radians = math.radians(angle - 90)
    return cx + radius * math.cos(radians), cy + radius * math.sin(radians)


def split_interval(start_min: int, end_min: int) -> List[Tuple[str, int, int]]:
    """Return ``(ring, start, end)`` pieces of a same-day interval."""

    if end_min <= NOON:
        return [(AM, start_min, end_min)]
    if start_min >= NOON:
        return [(PM, start_min, end_min)]
    return [(AM, start_min, NOON), (PM, NOON, end_min)]


def segment_angles(start_min: int, end_min: int) -> Tuple[float, float]:
    # sweep follows the minutes covered, so a whole 12-hour half is 360 degrees
    start_deg = clock_angle(start_min)
    return start_deg, start_deg + (end_min - start_min) * 0.5


def ring_radius(ring: str, dial: DialSettings = DIAL) -> int:
    return dial.radius_pm if ring == PM else dial.radius_am


def layout_day(
    tasks: Iterable[Task],
    projects: Iterable[Project],
    day: date,
    now: datetime,
    *,
    dial: DialSettings = DIAL,
) -> List[Segment]:
    colors: Dict[str, str] = {p.id: p.color for p in projects}
    segments: List[Segment] = []
    for task in tasks:
        if task.date != day:
            continue
        start_min, end_min = minutes_interval(task.start_time, task.end_time)
        active = is_task_active(task, now)
        alpha = progress_alpha(task_progress(task))
        color = colors.get(task.project_id, DIAL_FALLBACK_COLOR)
        for ring, seg_start, seg_end in split_interval(start_min, end_min):
            start_deg, end_deg = segment_angles(seg_start, seg_end)
            arc = ArcPath(
                cx=dial.center,
                cy=dial.center,
                radius=ring_radius(ring, dial),
                start_angle=start_deg,
                end_angle=end_deg,
            )
            segments.append(
                Segment(
                    task_id=task.id,
                    task=task,
                    ring=ring,
                    start_minute=seg_start,
                    end_minute=seg_end,
                    arc=arc,
                    color=color,
                    alpha=alpha,
                    is_active=active,
                )
            )
    segments.sort(key=lambda seg: seg.duration, reverse=True)
    return segments


def _angle_within(angle: float, start: float, end: float) -> bool:
    if start <= angle <= end:
        return True
    # arcs that cross twelve o'clock carry end angles above 360
    return start <= angle + 360 <= end


def hit_test(
    segments: Sequence[Segment],
    x: float,
    y: float,
    *,
    dial: DialSettings = DIAL,
) -> Optional[Segment]:
    """Return the top-most segment under ``(x, y)`` in dial coordinates."""

    dx = x - dial.center
    dy = y - dial.center
    distance = math.hypot(dx, dy)
    half = dial.stroke_width / 2
    angle = (math.degrees(math.atan2(dy, dx)) + 90) % 360

    for seg in reversed(segments):
        if abs(distance - seg.arc.radius) > half:
            continue
        if _angle_within(angle, seg.arc.start_angle, seg.arc.end_angle):
            return seg
    return None


def default_selection(
    tasks: Iterable[Task],
    day: date,
    now: datetime,
    current: Optional[str] = None,
) -> Optional[str]:
    """Pick the task to highlight when a day is opened.

    A still-valid explicit selection wins.  Otherwise, only on today, the task
    running right now is chosen.  There is no fallback to the first task.
    """

    day_tasks = [t for t in tasks if t.date == day]
    if current and any(t.id == current for t in day_tasks):
        return current
    if day != now.date():
        return None
    for task in day_tasks:
        if is_task_active(task, now):
            return task.id
    return None


def clock_hand(now: datetime) -> ClockHand:
    return ClockHand(angle=clock_angle(now.hour * 60 + now.minute), is_pm=now.hour >= 12)


def ring_fills(now: datetime, *, dial: DialSettings = DIAL) -> Dict[str, float]:
    """Opacity of each ring guide; the current half of the day is stronger."""

    is_pm = now.hour >= 12
    active, idle = dial.ring_alpha_active, dial.ring_alpha_idle
    return {AM: idle if is_pm else active, PM: active if is_pm else idle}


__all__ = [
    "AM",
    "PM",
    "ArcPath",
    "ClockHand",
    "Segment",
    "clock_hand",
    "default_selection",
    "hit_test",
    "layout_day",
    "polar_to_cartesian",
    "ring_fills",
    "ring_radius",
    "segment_angles",
    "split_interval",
]
