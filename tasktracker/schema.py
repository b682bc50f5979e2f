"""
TASK TRACKER - Task Schema Definition
=====================================
Models shared by the store, the manager and the CLI.
"""

from enum import Enum
from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class TaskPriority(str, Enum):
    """Task priority levels"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class TaskStatus(str, Enum):
    """Task lifecycle states"""
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class TaskCategory(str, Enum):
    """Task categories"""
    WORK = "Work"
    PERSONAL = "Personal"
    STUDY = "Study"


# Field names accepted as a list filter type
FILTER_FIELDS = ("status", "priority", "category")

# Characters that would break the one-line, comma-separated record format
FORBIDDEN_TEXT_CHARS = (",", "\r", "\n")


class Task(BaseModel):
    """Individual task definition. The title is the identity key."""
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    due_date: datetime
    priority: TaskPriority
    status: TaskStatus
    category: TaskCategory

    @field_validator("title", "description")
    @classmethod
    def _no_record_delimiters(cls, value: str) -> str:
        if any(ch in value for ch in FORBIDDEN_TEXT_CHARS):
            raise ValueError("must not contain commas or line breaks")
        return value

    def matches_title(self, title: str) -> bool:
        return self.title.casefold() == title.casefold()

    def field_value(self, name: str) -> str:
        """String value of an enum field, as compared by list filters"""
        return getattr(self, name).value

    def __str__(self) -> str:
        return (
            f"Title: {self.title}\n"
            f"Description: {self.description}\n"
            f"Category: {self.category.value}\n"
            f"Priority: {self.priority.value}\n"
            f"Status: {self.status.value}\n"
            f"Due Date: {self.due_date.strftime('%Y-%m-%d %H:%M')}\n"
        )


class TaskListing(BaseModel):
    """Result of a (possibly filtered) list query"""
    tasks: List[Task] = Field(default_factory=list)
    filter_applied: bool = False
    invalid_filter: bool = False  # filter value given with an unknown filter type


class UpdateResult(BaseModel):
    """Outcome of an update; warnings list values that were ignored"""
    task: Optional[Task] = None
    warnings: List[str] = Field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.task is not None
