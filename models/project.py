# planner/models/project.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field as PydField, field_validator
from sqlmodel import Field, SQLModel

from core.palette import normalize_color
from models.base import WireModel, new_id
from utils.datetime_utils import utc_now


class Project(WireModel):
    id: str = PydField(default_factory=new_id)
    name: str
    color: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Project name must not be empty")
        return value

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: str) -> str:
        return normalize_color(value)


class ProjectRecord(SQLModel, table=True):
    __tablename__ = "projects"

    id: str = Field(primary_key=True)
    name: str
    color: str
    description: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


__all__ = ["Project", "ProjectRecord"]
