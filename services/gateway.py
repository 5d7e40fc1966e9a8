"""Contract shared by every persistence backend."""
from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from models.project import Project
from models.task import Task


class GatewayError(RuntimeError):
    """A persistence call failed (transport, HTTP status or database)."""


class TaskNotFoundError(GatewayError):
    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


@runtime_checkable
class PersistenceGateway(Protocol):
    def list_projects(self) -> List[Project]: ...

    def create_project(self, project: Project) -> Project: ...

    def delete_project(self, project_id: str) -> None: ...

    def list_tasks(self) -> List[Task]: ...

    def create_task(self, task: Task) -> Task: ...

    def update_task(self, task: Task) -> Task: ...

    def delete_task(self, task_id: str) -> None: ...


__all__ = ["GatewayError", "PersistenceGateway", "TaskNotFoundError"]
