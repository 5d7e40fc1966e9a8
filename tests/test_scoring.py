from datetime import date
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from core.palette import MONTH_FALLBACK_COLOR, normalize_color
from core.scoring import (
    color_with_alpha,
    is_light_color,
    progress_alpha,
    project_progress,
    project_score,
    task_progress,
    task_style,
    text_color,
)
from models import ChecklistItem, Project, Task


def _task(project_id="p1", checklist=(), completed=False):
    return Task(
        project_id=project_id,
        title="Bake cookies",
        date=date(2024, 12, 7),
        start_time="09:00",
        end_time="11:00",
        checklist=[ChecklistItem(text=text, completed=done) for text, done in checklist],
        completed=completed,
    )


def test_completed_flag_overrides_checklist():
    task = _task(checklist=[("a", False), ("b", False)], completed=True)
    assert task_progress(task) == 1.0


def test_empty_checklist_scores_zero():
    assert task_progress(_task()) == 0.0


def test_partial_checklist_ratio():
    task = _task(checklist=[("a", True), ("b", False), ("c", False)])
    assert task_progress(task) == pytest.approx(1 / 3)


def test_alpha_floor_and_ceiling():
    assert progress_alpha(0) == pytest.approx(0.15)
    assert progress_alpha(1) == pytest.approx(1.0)
    assert progress_alpha(-2) == pytest.approx(0.15)
    values = [progress_alpha(p / 10) for p in range(11)]
    assert values == sorted(values)
    assert len(set(values)) == len(values)


def test_project_score_rounds_mean():
    tasks = [
        _task(completed=True),
        _task(checklist=[("a", True), ("b", False)]),
        _task(),
    ]
    assert project_score(tasks) == 50
    assert project_score([]) is None


def test_project_progress_skips_projects_without_tasks():
    baking = Project(name="Holiday Baking", color="#ef4444")
    gifts = Project(name="Gift Shopping", color="#22c55e")
    tasks = [_task(baking.id, completed=True), _task(baking.id), _task("orphan", completed=True)]
    rows = project_progress([baking, gifts], tasks)
    assert [(r.project.id, r.score, r.task_count) for r in rows] == [(baking.id, 50, 2)]


def test_light_hues_keep_dark_text():
    assert is_light_color("#EAB308")
    assert text_color("#eab308", 1.0) == "#1e293b"
    assert text_color("#ef4444", 1.0) == "#ffffff"
    assert text_color("#ef4444", 0.5) == "#1e293b"


def test_color_with_alpha_appends_hex_channel():
    assert color_with_alpha("#ef4444", 1.0) == "#ef4444ff"
    assert color_with_alpha("#ef4444", 0.0) == "#ef444400"
    assert color_with_alpha("#ef4444", 0.5) == "#ef444480"


def test_task_style_uses_fallback_for_missing_project():
    style = task_style(_task(completed=True), None)
    assert style.border == MONTH_FALLBACK_COLOR
    assert style.alpha == pytest.approx(1.0)
    assert style.text_color == "#ffffff"

    project = Project(name="Decor", color="#EAB308")
    style = task_style(_task(project.id, completed=True), project)
    assert style.background == "#eab308ff"
    assert style.text_color == "#1e293b"


def test_task_style_argb_moves_alpha_to_the_front():
    style = task_style(_task(), Project(name="Decor", color="#ef4444"))
    assert style.background == "#ef444426"
    assert style.argb == "#26ef4444"


def test_normalize_color_validates():
    assert normalize_color(" #ABCDEF ") == "#abcdef"
    with pytest.raises(ValueError):
        normalize_color("red")
