"""Domain models and ORM rows exposed by the Family Planner application."""
from .project import Project, ProjectRecord
from .task import (
    ChecklistItem,
    ChecklistItemRecord,
    ContentIdea,
    ContentIdeaRecord,
    Task,
    TaskRecord,
)

__all__ = [
    "ChecklistItem",
    "ChecklistItemRecord",
    "ContentIdea",
    "ContentIdeaRecord",
    "Project",
    "ProjectRecord",
    "Task",
    "TaskRecord",
]
