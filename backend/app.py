"""REST backend exposing the local store over HTTP+JSON.

Run with:
    planner-api            (console script)
    python -m uvicorn backend.app:create_app --factory --port 3001
"""

from __future__ import annotations

from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.logs import ensure_logger
from core.settings import API, APP_NAME
from models.project import Project
from models.task import Task
from services.gateway import GatewayError, TaskNotFoundError
from services.sql_gateway import SqlGateway
from storage.db import init_db

logger = ensure_logger("planner.backend")


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": message})


def create_app(gateway: Optional[SqlGateway] = None) -> FastAPI:
    if gateway is None:
        init_db()
        gateway = SqlGateway()
    store = gateway

    app = FastAPI(title=f"{APP_NAME} API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(API.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TaskNotFoundError)
    async def _not_found(_request: Request, exc: TaskNotFoundError):
        return _error(404, str(exc))

    @app.exception_handler(GatewayError)
    async def _gateway_failed(_request: Request, exc: GatewayError):
        logger.error("Gateway error: %s", exc)
        return _error(500, str(exc))

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(_request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if any(err.get("type") == "json_invalid" for err in errors):
            return _error(400, "Request body must be JSON")
        return _error(422, "; ".join(str(err.get("msg")) for err in errors))

    # --- projects ---
    @app.get("/projects")
    def list_projects():
        return [p.to_wire() for p in store.list_projects()]

    @app.post("/projects")
    def create_project(project: Project):
        return store.create_project(project).to_wire()

    @app.delete("/projects/{project_id}")
    def delete_project(project_id: str):
        store.delete_project(project_id)
        return {"success": True}

    # --- tasks ---
    @app.get("/tasks")
    def list_tasks():
        return [t.to_wire() for t in store.list_tasks()]

    @app.post("/tasks")
    def create_task(task: Task):
        return store.create_task(task).to_wire()

    @app.put("/tasks/{task_id}")
    def update_task(task_id: str, task: Task):
        if task.id != task_id:
            task = task.model_copy(update={"id": task_id})
        return store.update_task(task).to_wire()

    @app.delete("/tasks/{task_id}")
    def delete_task(task_id: str):
        store.delete_task(task_id)
        return {"success": True}

    return app


def main() -> None:
    logger.info("Starting API on %s:%s", API.host, API.port)
    uvicorn.run(create_app(), host=API.host, port=API.port)


if __name__ == "__main__":
    main()
