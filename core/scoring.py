"""Completion scoring and the colour intensity derived from it.

Every function here is pure: the same task and project always produce the
same progress, alpha and colours.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from core.palette import MONTH_FALLBACK_COLOR
from core.settings import SCORING
from models.project import Project
from models.task import Task


@dataclass(frozen=True)
class ProjectProgress:
    project: Project
    score: int
    task_count: int


@dataclass(frozen=True)
class TaskStyle:
    background: str  # #RRGGBBAA
    text_color: str
    border: str
    alpha: float

    @property
    def argb(self) -> str:
        """``background`` reordered to ``#AARRGGBB``, the order flet reads."""
        return f"#{self.background[7:9]}{self.background[1:7]}"


def task_progress(task: Task) -> float:
    """Return completion in ``[0, 1]``; the ``completed`` flag overrides the checklist."""

    if task.completed:
        return 1.0
    total = len(task.checklist)
    if total == 0:
        return 0.0
    done = sum(1 for item in task.checklist if item.completed)
    return done / total


def project_score(tasks: Sequence[Task]) -> Optional[int]:
    if not tasks:
        return None
    total = sum(task_progress(task) for task in tasks)
    percent = round(100 * total / len(tasks))
    return max(0, min(100, percent))


def project_progress(projects: Iterable[Project], tasks: Iterable[Task]) -> List[ProjectProgress]:
    """Per-project scores in project order; projects without tasks are skipped."""

    by_project: dict[str, List[Task]] = {}
    for task in tasks:
        by_project.setdefault(task.project_id, []).append(task)

    rows: List[ProjectProgress] = []
    for project in projects:
        owned = by_project.get(project.id, [])
        score = project_score(owned)
        if score is None:
            continue
        rows.append(ProjectProgress(project=project, score=score, task_count=len(owned)))
    return rows


def progress_alpha(progress: float) -> float:
    progress = max(0.0, min(1.0, progress))
    return SCORING.alpha_floor + progress * (1 - SCORING.alpha_floor)


def is_light_color(color: str) -> bool:
    lowered = (color or "").lower()
    return any(hue in lowered for hue in SCORING.light_hues)


def text_color(base_color: str, alpha: float) -> str:
    if alpha > SCORING.text_alpha_threshold and not is_light_color(base_color):
        return SCORING.light_text
    return SCORING.dark_text


def color_with_alpha(base_color: str, alpha: float) -> str:
    """Append the alpha channel to ``#RRGGBB`` as two hex digits."""

    alpha_int = max(0, min(255, round(alpha * 255)))
    return f"{base_color}{alpha_int:02x}"


def task_style(
    task: Task,
    project: Optional[Project],
    *,
    fallback: str = MONTH_FALLBACK_COLOR,
) -> TaskStyle:
    base = project.color if project else fallback
    alpha = progress_alpha(task_progress(task))
    return TaskStyle(
        background=color_with_alpha(base, alpha),
        text_color=text_color(base, alpha),
        border=base,
        alpha=alpha,
    )


__all__ = [
    "ProjectProgress",
    "TaskStyle",
    "color_with_alpha",
    "is_light_color",
    "progress_alpha",
    "project_progress",
    "project_score",
    "task_progress",
    "task_style",
    "text_color",
]
