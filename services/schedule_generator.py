"""Prompt-to-schedule generation backed by Gemini."""
from __future__ import annotations

import json
import os
from typing import Any, Dict, Iterable, List, Optional, Sequence

from google import genai
from google.genai import types
from pydantic import ValidationError

from core.logs import ensure_logger
from core.settings import AI
from models.base import new_id
from models.project import Project
from models.task import CONTENT_TYPES, ChecklistItem, ContentIdea, Task


class GenerationError(RuntimeError):
    """The AI service failed or answered with something unusable."""


SYSTEM_INSTRUCTION = """\
You are an expert family task planner and social media content strategist.
The user has a set of projects for {month_name} {year}.
Based on their request, generate a list of calendar tasks.
Each task must belong to one of the provided projects.
Tasks should have specific dates in {month_name} {year}.
Time windows should be realistic (e.g., baking takes 2-3 hours).
Start and end must fall on the same day, with the start before the end.
Include a checklist of sub-tasks for each task.

For each task, provide exactly {ideas} social media content ideas:
1. A 'video' idea (e.g., Reel, TikTok trend)
2. A 'story' idea (e.g., Behind the scenes, poll)
3. An 'image' idea (e.g., Aesthetic photo, finished result)

Available Projects: {projects}
"""

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def response_schema(month_name: str, year: int) -> Dict[str, Any]:
    return {
        "type": "ARRAY",
        "items": {
            "type": "OBJECT",
            "properties": {
                "projectId": {"type": "STRING", "description": "The ID of the project this task belongs to"},
                "title": {"type": "STRING", "description": "Short title of the task"},
                "date": {
                    "type": "STRING",
                    "description": f"Date in YYYY-MM-DD format (must be in {month_name} {year})",
                },
                "startTime": {"type": "STRING", "description": "Start time in HH:mm 24h format"},
                "endTime": {"type": "STRING", "description": "End time in HH:mm 24h format"},
                "description": {"type": "STRING", "description": "Brief description of the task"},
                "checklistItems": {
                    "type": "ARRAY",
                    "items": {"type": "STRING"},
                    "description": "List of strings for checklist items",
                },
                "contentIdeas": {
                    "type": "ARRAY",
                    "items": {
                        "type": "OBJECT",
                        "properties": {
                            "type": {"type": "STRING", "enum": list(CONTENT_TYPES)},
                            "text": {"type": "STRING", "description": "Description of the content idea"},
                        },
                        "required": ["type", "text"],
                    },
                    "description": "List of 3 social media ideas (video, story, image)",
                },
            },
            "required": ["projectId", "title", "date", "startTime", "endTime", "checklistItems", "contentIdeas"],
        },
    }


def resolve_api_key(env: Optional[Dict[str, str]] = None) -> Optional[str]:
    environ = os.environ if env is None else env
    for name in AI.api_key_envs:
        value = environ.get(name)
        if value:
            return value
    return None


class ScheduleGenerator:
    def __init__(self, client: Any = None, *, api_key: Optional[str] = None, model: str = AI.model):
        self._client = client
        self._api_key = api_key
        self.model = model
        self.logger = ensure_logger("planner.ai")

    @property
    def client(self):
        if self._client is None:
            key = self._api_key or resolve_api_key()
            if not key:
                raise GenerationError("Gemini API key is not configured (set GEMINI_API_KEY)")
            self._client = genai.Client(api_key=key)
        return self._client

    def generate(
        self,
        projects: Sequence[Project],
        prompt: str,
        target_year: int,
        target_month: int = AI.target_month,
    ) -> List[Task]:
        if not prompt.strip():
            raise GenerationError("Prompt is empty")
        if not projects:
            raise GenerationError("Define at least one project before generating a schedule")

        month_name = MONTH_NAMES[target_month - 1]
        instruction = SYSTEM_INSTRUCTION.format(
            month_name=month_name,
            year=target_year,
            ideas=AI.ideas_per_task,
            projects=json.dumps([{"id": p.id, "name": p.name} for p in projects]),
        )
        config = types.GenerateContentConfig(
            system_instruction=instruction,
            response_mime_type="application/json",
            response_schema=response_schema(month_name, target_year),
        )
        try:
            response = self.client.models.generate_content(model=self.model, contents=prompt, config=config)
        except GenerationError:
            raise
        except Exception as exc:
            self.logger.error("Schedule generation failed: %s", exc)
            raise GenerationError(f"Schedule generation failed: {exc}") from exc

        try:
            raw = json.loads(getattr(response, "text", None) or "[]")
        except json.JSONDecodeError as exc:
            self.logger.error("Gemini returned non-JSON output")
            raise GenerationError("AI response was not valid JSON") from exc
        if not isinstance(raw, list):
            raise GenerationError("AI response was not a list of tasks")

        tasks = repair_generated(raw, projects, logger=self.logger)
        self.logger.info("Generated %d of %d tasks for %s %s", len(tasks), len(raw), month_name, target_year)
        return tasks


def _checklist(items: Any) -> List[ChecklistItem]:
    if not isinstance(items, list):
        return []
    texts = [str(item.get("text") or "") if isinstance(item, dict) else str(item) for item in items]
    return [ChecklistItem(id=new_id(), text=text.strip()) for text in texts if text.strip()]


def _ideas(items: Any) -> List[ContentIdea]:
    if not isinstance(items, list):
        return []
    ideas: List[ContentIdea] = []
    for raw in items:
        if not isinstance(raw, dict) or raw.get("type") not in CONTENT_TYPES:
            continue
        ideas.append(ContentIdea(id=new_id(), type=raw["type"], text=str(raw.get("text") or "")))
    return ideas


def repair_generated(raw_items: Iterable[Any], projects: Sequence[Project], *, logger=None) -> List[Task]:
    """Turn loosely-shaped AI output into valid, not-yet-completed tasks."""

    logger = logger or ensure_logger("planner.ai")
    known = {p.id for p in projects}
    tasks: List[Task] = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            logger.warning("Dropping non-object AI item: %r", raw)
            continue
        try:
            task = Task(
                id=new_id(),
                project_id=str(raw.get("projectId") or ""),
                title=str(raw.get("title") or "").strip() or "Untitled",
                date=raw.get("date"),
                start_time=raw.get("startTime") or "",
                end_time=raw.get("endTime") or "",
                description=raw.get("description") or None,
                checklist=_checklist(raw.get("checklistItems") or raw.get("checklist")),
                content_ideas=_ideas(raw.get("contentIdeas")),
                completed=False,
            )
        except (ValidationError, TypeError, ValueError) as exc:
            logger.warning("Dropping invalid AI task %r: %s", raw.get("title"), exc)
            continue
        if task.project_id not in known:
            logger.warning("AI task %r references unknown project %r", task.title, task.project_id)
        tasks.append(task)
    return tasks


__all__ = ["GenerationError", "ScheduleGenerator", "repair_generated", "resolve_api_key", "response_schema"]
