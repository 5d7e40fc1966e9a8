"""In-memory planner state with optimistic persistence."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from core.logs import ensure_logger
from core.month_grid import DayCell, month_grid, move_task_to_date
from core.palette import DEFAULT_PROJECTS
from core.radial import Segment, default_selection, layout_day
from core.scoring import ProjectProgress, project_progress
from core.settings import AI
from models.base import new_id
from models.project import Project
from models.task import Task
from services.gateway import GatewayError, PersistenceGateway
from services.schedule_generator import ScheduleGenerator


TaskInput = Union[Task, Mapping[str, Any]]
Dispatcher = Callable[[Callable[[], None]], Any]


def run_now(fn: Callable[[], None]) -> None:
    fn()


class PlannerState:
    """Projects and tasks held in memory and mirrored to a gateway.

    Mutations update memory first and then hand the gateway call to
    ``dispatch``.  A failed call is logged and the local change stays in
    place; nothing is rolled back or retried.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        generator: Optional[ScheduleGenerator] = None,
        *,
        dispatch: Dispatcher = run_now,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.gateway = gateway
        self.generator = generator or ScheduleGenerator()
        self._dispatch = dispatch
        self.clock = clock
        self.projects: List[Project] = []
        self.tasks: List[Task] = []
        self.loading = False
        self._selection: Dict[date, str] = {}
        self._listeners: set = set()
        self.logger = ensure_logger("planner.state")

    # ------------------------------------------------------------------
    # Change notifications
    def subscribe(self, callback: Callable[[], None]) -> None:
        self._listeners.add(callback)

    def unsubscribe(self, callback: Callable[[], None]) -> None:
        self._listeners.discard(callback)

    def _emit(self) -> None:
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                self.logger.exception("State listener %r failed", listener)

    def _persist(self, op: str, fn: Callable[..., Any], *args: Any) -> None:
        def _call() -> None:
            try:
                fn(*args)
            except GatewayError as exc:
                self.logger.error("%s failed, local state kept: %s", op, exc)

        self._dispatch(_call)

    # ------------------------------------------------------------------
    # Loading
    def load(self) -> None:
        self.loading = True
        self._emit()
        failed = False
        try:
            projects = self.gateway.list_projects()
            tasks = self.gateway.list_tasks()
        except GatewayError as exc:
            self.logger.error("Failed to load data: %s", exc)
            projects, tasks = [], []
            failed = True
        finally:
            self.loading = False

        self.projects = list(projects)
        self.tasks = list(tasks)
        if not self.projects and not failed:
            self._seed_default_projects()
        self.logger.info("Loaded %d projects and %d tasks", len(self.projects), len(self.tasks))
        self._emit()

    def _seed_default_projects(self) -> None:
        for preset in DEFAULT_PROJECTS:
            project = Project(**preset)
            self.projects.append(project)
            self._persist("create_project", self.gateway.create_project, project)

    # ------------------------------------------------------------------
    # Projects
    def project_for(self, task: Task) -> Optional[Project]:
        return next((p for p in self.projects if p.id == task.project_id), None)

    def add_project(self, name: str, color: str, description: Optional[str] = None) -> Optional[Project]:
        try:
            project = Project(name=name, color=color, description=description or None)
        except ValidationError as exc:
            self.logger.error("Rejected project %r: %s", name, exc)
            return None
        self.projects.append(project)
        self._emit()
        self._persist("create_project", self.gateway.create_project, project)
        return project

    def delete_project(self, project_id: str) -> None:
        before = len(self.projects)
        self.projects = [p for p in self.projects if p.id != project_id]
        if len(self.projects) == before:
            return
        self._emit()
        self._persist("delete_project", self.gateway.delete_project, project_id)

    # ------------------------------------------------------------------
    # Tasks
    def get_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def _validate(self, data: TaskInput, op: str) -> Optional[Task]:
        raw = data.model_dump() if isinstance(data, Task) else dict(data)
        try:
            return Task.model_validate(raw)
        except ValidationError as exc:
            self.logger.error("%s aborted, invalid task %r: %s", op, raw.get("title"), exc)
            return None

    def create_task(self, data: TaskInput) -> Optional[Task]:
        task = self._validate(data, "create_task")
        if task is None:
            return None
        if self.get_task(task.id):
            self.logger.error("create_task aborted, duplicate id %s", task.id)
            return None
        self.tasks.append(task)
        self._emit()
        self._persist("create_task", self.gateway.create_task, task)
        return task

    def create_tasks(self, items: Iterable[TaskInput]) -> List[Task]:
        created: List[Task] = []
        for data in items:
            task = self._validate(data, "create_task")
            if task is None or self.get_task(task.id):
                continue
            self.tasks.append(task)
            created.append(task)
        if created:
            self._emit()
            for task in created:
                self._persist("create_task", self.gateway.create_task, task)
        return created

    def update_task(self, data: TaskInput) -> Optional[Task]:
        task = self._validate(data, "update_task")
        if task is None:
            return None
        for idx, existing in enumerate(self.tasks):
            if existing.id == task.id:
                self.tasks[idx] = task
                break
        else:
            self.logger.error("update_task aborted, unknown task %s", task.id)
            return None
        self._emit()
        self._persist("update_task", self.gateway.update_task, task)
        return task

    def delete_task(self, task_id: str) -> None:
        before = len(self.tasks)
        self.tasks = [t for t in self.tasks if t.id != task_id]
        if len(self.tasks) == before:
            return
        for day, selected in list(self._selection.items()):
            if selected == task_id:
                del self._selection[day]
        self._emit()
        self._persist("delete_task", self.gateway.delete_task, task_id)

    def move_task(self, task_id: str, new_date: date) -> Optional[Task]:
        task = self.get_task(task_id)
        if task is None:
            return None
        moved = move_task_to_date(task, new_date)
        if moved is task:
            return task
        return self.update_task(moved)

    def toggle_checklist_item(self, task_id: str, item_id: str) -> Optional[Task]:
        task = self.get_task(task_id)
        if task is None:
            return None
        checklist = [
            item.model_copy(update={"completed": not item.completed}) if item.id == item_id else item
            for item in task.checklist
        ]
        return self.update_task(task.model_copy(update={"checklist": checklist}))

    def set_completed(self, task_id: str, completed: bool) -> Optional[Task]:
        task = self.get_task(task_id)
        if task is None:
            return None
        return self.update_task(task.model_copy(update={"completed": completed}))

    # ------------------------------------------------------------------
    # AI planning
    def generate_schedule(self, prompt: str, year: Optional[int] = None, month: Optional[int] = None) -> List[Task]:
        """Ask the generator for a preview; ``GenerationError`` propagates to the caller."""

        target_year = year or self.clock().year
        return self.generator.generate(self.projects, prompt, target_year, month or AI.target_month)

    def accept_generated(self, tasks: Sequence[Task]) -> List[Task]:
        fresh = [
            t.model_copy(update={"id": new_id(), "completed": False}, deep=True)
            for t in tasks
        ]
        return self.create_tasks(fresh)

    # ------------------------------------------------------------------
    # Derived views
    def project_progress(self) -> List[ProjectProgress]:
        return project_progress(self.projects, self.tasks)

    def month_cells(self, year: int, month: int, now: Optional[datetime] = None) -> List[DayCell]:
        return month_grid(year, month, self.tasks, now or self.clock())

    def day_segments(self, day: date, now: Optional[datetime] = None) -> List[Segment]:
        return layout_day(self.tasks, self.projects, day, now or self.clock())

    def select_task(self, day: date, task_id: Optional[str]) -> None:
        if task_id is None:
            self._selection.pop(day, None)
        else:
            self._selection[day] = task_id
        self._emit()

    def selected_task(self, day: date, now: Optional[datetime] = None) -> Optional[Task]:
        chosen = default_selection(self.tasks, day, now or self.clock(), self._selection.get(day))
        if chosen is None:
            self._selection.pop(day, None)
            return None
        self._selection[day] = chosen
        return self.get_task(chosen)


__all__ = ["PlannerState", "run_now"]
