# planner/services/sql_gateway.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from core.logs import ensure_logger
from models.project import Project, ProjectRecord
from models.task import (
    ChecklistItem,
    ChecklistItemRecord,
    ContentIdea,
    ContentIdeaRecord,
    Task,
    TaskRecord,
)
from services.gateway import GatewayError, TaskNotFoundError
from storage.db import get_session
from utils.datetime_utils import utc_now


TASK_FIELDS = ("project_id", "title", "date", "start_time", "end_time", "description", "completed")


class SqlGateway:
    """Local SQLite persistence for projects and tasks.

    Nested checklist and content-idea rows are reconciled by id on update:
    untouched rows keep their identity, removed ids are deleted and new ids
    are inserted.
    """

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory
        self.logger = ensure_logger("planner.storage")

    @contextmanager
    def _session(self, op: str) -> Iterator[Session]:
        try:
            with self._session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            self.logger.error("%s failed: %s", op, exc)
            raise GatewayError(f"{op} failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Projects
    def list_projects(self) -> List[Project]:
        with self._session("list_projects") as s:
            stmt = select(ProjectRecord).order_by(ProjectRecord.created_at.asc())
            return [_project_from_row(row) for row in s.exec(stmt)]

    def create_project(self, project: Project) -> Project:
        with self._session("create_project") as s:
            if s.get(ProjectRecord, project.id):
                raise GatewayError(f"Project already exists: {project.id}")
            row = ProjectRecord(
                id=project.id,
                name=project.name,
                color=project.color,
                description=project.description,
            )
            s.add(row)
            s.commit()
            s.refresh(row)
            self.logger.info("Project created: %s", row.id)
            return _project_from_row(row)

    def delete_project(self, project_id: str) -> None:
        with self._session("delete_project") as s:
            row = s.get(ProjectRecord, project_id)
            if not row:
                return
            s.delete(row)
            s.commit()
            self.logger.info("Project deleted: %s", project_id)

    # ------------------------------------------------------------------
    # Tasks
    def list_tasks(self) -> List[Task]:
        with self._session("list_tasks") as s:
            rows = list(
                s.exec(select(TaskRecord).order_by(TaskRecord.date.asc(), TaskRecord.start_time.asc()))
            )
            checklist = _group(s.exec(select(ChecklistItemRecord).order_by(ChecklistItemRecord.position)))
            ideas = _group(s.exec(select(ContentIdeaRecord).order_by(ContentIdeaRecord.position)))
            tasks: List[Task] = []
            for row in rows:
                task = self._task_from_rows(row, checklist.get(row.id, []), ideas.get(row.id, []))
                if task is not None:
                    tasks.append(task)
            return tasks

    def get_task(self, task_id: str) -> Optional[Task]:
        with self._session("get_task") as s:
            return self._load_task(s, task_id)

    def create_task(self, task: Task) -> Task:
        with self._session("create_task") as s:
            if s.get(TaskRecord, task.id):
                raise GatewayError(f"Task already exists: {task.id}")
            s.add(TaskRecord(id=task.id, **{name: getattr(task, name) for name in TASK_FIELDS}))
            for position, item in enumerate(task.checklist):
                s.add(_checklist_row(item, task.id, position))
            for position, idea in enumerate(task.content_ideas):
                s.add(_idea_row(idea, task.id, position))
            s.commit()
            self.logger.info("Task created: %s", task.id)
            return self._load_task(s, task.id)

    def update_task(self, task: Task) -> Task:
        with self._session("update_task") as s:
            row = s.get(TaskRecord, task.id)
            if not row:
                raise TaskNotFoundError(task.id)
            for name in TASK_FIELDS:
                setattr(row, name, getattr(task, name))
            row.updated_at = utc_now()
            s.add(row)
            self._sync_checklist(s, task.id, task.checklist)
            self._sync_ideas(s, task.id, task.content_ideas)
            s.commit()
            self.logger.info("Task updated: %s", task.id)
            return self._load_task(s, task.id)

    def delete_task(self, task_id: str) -> None:
        with self._session("delete_task") as s:
            row = s.get(TaskRecord, task_id)
            if not row:
                return
            for model in (ChecklistItemRecord, ContentIdeaRecord):
                for child in s.exec(select(model).where(model.task_id == task_id)):
                    s.delete(child)
            s.flush()
            s.delete(row)
            s.commit()
            self.logger.info("Task deleted: %s", task_id)

    # ------------------------------------------------------------------
    def _sync_checklist(self, s: Session, task_id: str, items: Sequence[ChecklistItem]) -> None:
        existing = {
            row.id: row
            for row in s.exec(select(ChecklistItemRecord).where(ChecklistItemRecord.task_id == task_id))
        }
        wanted = {item.id for item in items}
        for row_id, row in existing.items():
            if row_id not in wanted:
                s.delete(row)
        for position, item in enumerate(items):
            row = existing.get(item.id)
            if row is None:
                s.add(_checklist_row(item, task_id, position))
                continue
            if (row.text, row.completed, row.position) != (item.text, item.completed, position):
                row.text = item.text
                row.completed = item.completed
                row.position = position
                row.updated_at = utc_now()
                s.add(row)

    def _sync_ideas(self, s: Session, task_id: str, ideas: Sequence[ContentIdea]) -> None:
        existing = {
            row.id: row
            for row in s.exec(select(ContentIdeaRecord).where(ContentIdeaRecord.task_id == task_id))
        }
        wanted = {idea.id for idea in ideas}
        for row_id, row in existing.items():
            if row_id not in wanted:
                s.delete(row)
        for position, idea in enumerate(ideas):
            row = existing.get(idea.id)
            if row is None:
                s.add(_idea_row(idea, task_id, position))
                continue
            if (row.type, row.text, row.position) != (idea.type, idea.text, position):
                row.type = idea.type
                row.text = idea.text
                row.position = position
                row.updated_at = utc_now()
                s.add(row)

    def _load_task(self, s: Session, task_id: str) -> Optional[Task]:
        row = s.get(TaskRecord, task_id)
        if not row:
            return None
        checklist = s.exec(
            select(ChecklistItemRecord)
            .where(ChecklistItemRecord.task_id == task_id)
            .order_by(ChecklistItemRecord.position)
        )
        ideas = s.exec(
            select(ContentIdeaRecord)
            .where(ContentIdeaRecord.task_id == task_id)
            .order_by(ContentIdeaRecord.position)
        )
        return self._task_from_rows(row, list(checklist), list(ideas))

    def _task_from_rows(
        self,
        row: TaskRecord,
        checklist: Sequence[ChecklistItemRecord],
        ideas: Sequence[ContentIdeaRecord],
    ) -> Optional[Task]:
        try:
            return Task(
                id=row.id,
                **{name: getattr(row, name) for name in TASK_FIELDS},
                checklist=[ChecklistItem(id=c.id, text=c.text, completed=c.completed) for c in checklist],
                content_ideas=[ContentIdea(id=i.id, type=i.type, text=i.text) for i in ideas],
            )
        except ValidationError as exc:
            self.logger.warning("Skipping invalid task row %s: %s", row.id, exc)
            return None


def _group(rows) -> Dict[str, list]:
    grouped: Dict[str, list] = {}
    for row in rows:
        grouped.setdefault(row.task_id, []).append(row)
    return grouped


def _project_from_row(row: ProjectRecord) -> Project:
    return Project(id=row.id, name=row.name, color=row.color, description=row.description)


def _checklist_row(item: ChecklistItem, task_id: str, position: int) -> ChecklistItemRecord:
    return ChecklistItemRecord(
        id=item.id, task_id=task_id, position=position, text=item.text, completed=item.completed
    )


def _idea_row(idea: ContentIdea, task_id: str, position: int) -> ContentIdeaRecord:
    return ContentIdeaRecord(id=idea.id, task_id=task_id, position=position, type=idea.type, text=idea.text)


__all__ = ["SqlGateway"]
