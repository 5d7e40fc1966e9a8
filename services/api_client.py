"""HTTP+JSON client for the planner REST backend."""
from __future__ import annotations

from typing import Any, List, Optional, Type, TypeVar

import requests
from pydantic import ValidationError

from core.logs import ensure_logger
from core.settings import API
from models.base import WireModel
from models.project import Project
from models.task import Task
from services.gateway import GatewayError, TaskNotFoundError


M = TypeVar("M", bound=WireModel)


class HttpGateway:
    def __init__(
        self,
        base_url: str = API.default_url,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = API.timeout_sec,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.logger = ensure_logger("planner.api")

    # ------------------------------------------------------------------
    def list_projects(self) -> List[Project]:
        return self._parse_list(Project, self._request("GET", "/projects"))

    def create_project(self, project: Project) -> Project:
        data = self._request("POST", "/projects", json=project.to_wire())
        return self._parse_one(Project, data, project)

    def delete_project(self, project_id: str) -> None:
        self._request("DELETE", f"/projects/{project_id}")

    def list_tasks(self) -> List[Task]:
        return self._parse_list(Task, self._request("GET", "/tasks"))

    def create_task(self, task: Task) -> Task:
        data = self._request("POST", "/tasks", json=task.to_wire())
        return self._parse_one(Task, data, task)

    def update_task(self, task: Task) -> Task:
        data = self._request("PUT", f"/tasks/{task.id}", json=task.to_wire(), task_id=task.id)
        return self._parse_one(Task, data, task)

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", f"/tasks/{task_id}")

    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, *, json: Any = None, task_id: Optional[str] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(method, url, json=json, timeout=self.timeout)
        except requests.RequestException as exc:
            self.logger.error("%s %s failed: %s", method, path, exc)
            raise GatewayError(f"{method} {path} failed: {exc}") from exc

        if resp.status_code == 404 and task_id is not None:
            raise TaskNotFoundError(task_id)
        if resp.status_code >= 400:
            message = _error_message(resp)
            self.logger.warning("%s %s -> %s: %s", method, path, resp.status_code, message)
            raise GatewayError(f"{method} {path} returned {resp.status_code}: {message}")
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise GatewayError(f"{method} {path} returned invalid JSON") from exc

    def _parse_one(self, model: Type[M], data: Any, sent: M) -> M:
        """Validate a write reply; an empty or non-object body echoes ``sent``."""
        if not isinstance(data, dict):
            return sent
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            self.logger.warning("Invalid %s reply for %s: %s", model.__name__, sent.id, exc)
            raise GatewayError(f"Backend returned an invalid {model.__name__}") from exc

    def _parse_list(self, model: Type[M], data: Any) -> List[M]:
        if not isinstance(data, list):
            raise GatewayError(f"Expected a list of {model.__name__} records")
        items: List[M] = []
        for raw in data:
            try:
                items.append(model.model_validate(raw))
            except ValidationError as exc:
                ident = raw.get("id") if isinstance(raw, dict) else None
                self.logger.warning("Skipping invalid %s %s: %s", model.__name__, ident, exc)
        return items


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200]
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return resp.reason or ""


__all__ = ["HttpGateway"]
