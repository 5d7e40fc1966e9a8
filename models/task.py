# planner/models/task.py
from __future__ import annotations

from datetime import date as Date, datetime
from typing import List, Literal, Optional

from pydantic import Field as PydField, field_validator, model_validator
from sqlmodel import Field, SQLModel

from helpers.datetime_utils import minutes_interval, normalize_task_date, parse_hhmm
from models.base import WireModel, new_id
from utils.datetime_utils import utc_now


ContentType = Literal["video", "story", "image"]
CONTENT_TYPES = ("video", "story", "image")


class ChecklistItem(WireModel):
    id: str = PydField(default_factory=new_id)
    text: str
    completed: bool = False


class ContentIdea(WireModel):
    id: str = PydField(default_factory=new_id)
    type: ContentType
    text: str


class Task(WireModel):
    """A dated, time-boxed unit of work belonging to a project.

    ``start_time``/``end_time`` are same-day ``HH:mm`` strings and the start
    must be strictly earlier than the end.
    """

    id: str = PydField(default_factory=new_id)
    project_id: str
    title: str
    date: Date
    start_time: str
    end_time: str
    description: Optional[str] = None
    checklist: List[ChecklistItem] = PydField(default_factory=list)
    content_ideas: List[ContentIdea] = PydField(default_factory=list)
    completed: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value):
        return normalize_task_date(value)

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_time(cls, value: str) -> str:
        value = value.strip()
        parse_hhmm(value)
        return value

    @field_validator("checklist", "content_ideas", mode="before")
    @classmethod
    def _default_list(cls, value):
        return [] if value is None else value

    @model_validator(mode="after")
    def _check_interval(self) -> "Task":
        minutes_interval(self.start_time, self.end_time)
        return self


class TaskRecord(SQLModel, table=True):
    __tablename__ = "tasks"

    id: str = Field(primary_key=True)
    project_id: str = Field(index=True)
    title: str
    date: Date = Field(index=True)
    start_time: str
    end_time: str
    description: Optional[str] = None
    completed: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ChecklistItemRecord(SQLModel, table=True):
    __tablename__ = "checklist_items"

    id: str = Field(primary_key=True)
    task_id: str = Field(foreign_key="tasks.id", index=True)
    position: int = 0
    text: str
    completed: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ContentIdeaRecord(SQLModel, table=True):
    __tablename__ = "content_ideas"

    id: str = Field(primary_key=True)
    task_id: str = Field(foreign_key="tasks.id", index=True)
    position: int = 0
    type: str
    text: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


__all__ = [
    "CONTENT_TYPES",
    "ChecklistItem",
    "ChecklistItemRecord",
    "ContentIdea",
    "ContentIdeaRecord",
    "ContentType",
    "Task",
    "TaskRecord",
]
