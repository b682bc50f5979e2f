"""
TASK TRACKER - Task Manager
===========================
Query and mutation operations over the task collection.

The store is the source of truth: every read or mutating operation
reloads it first, and every mutation is persisted before returning.
"""

import logging
from datetime import datetime
from typing import Optional, List, Union, Type, TypeVar
from enum import Enum

from .schema import (
    Task, TaskListing, TaskPriority, TaskStatus, UpdateResult, FILTER_FIELDS,
    FORBIDDEN_TEXT_CHARS
)
from .store import TaskStore

logger = logging.getLogger("tasktracker.manager")

# Due dates accepted on update, most specific first
UPDATE_DATE_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d",
)

E = TypeVar("E", bound=Enum)


def parse_user_date(value: str) -> Optional[datetime]:
    """Parse a user-entered due date, or None if no format matches"""
    value = value.strip()
    for fmt in UPDATE_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def _enum_value(enum_cls: Type[E], value: Union[str, E]) -> Optional[E]:
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class TaskManager:
    """
    Task Manager over an injected TaskStore.

    Title matching is case-insensitive throughout. Title uniqueness is
    the caller's job: add_task() does not check it (see has_title()).
    """

    def __init__(self, store: TaskStore):
        self.store = store
        self.tasks: List[Task] = []

    # ========================================
    # PERSISTENCE
    # ========================================

    def reload(self) -> List[Task]:
        """Discard in-memory state and reload from the store"""
        self.tasks = self.store.load_all()
        return self.tasks

    def _save(self) -> None:
        self.store.overwrite_all(self.tasks)

    def _find(self, title: str) -> Optional[Task]:
        for task in self.tasks:
            if task.matches_title(title):
                return task
        return None

    # ========================================
    # TASK OPERATIONS
    # ========================================

    def add_task(self, task: Task) -> Task:
        """Append a task to the list and the store"""
        self.tasks.append(task)
        self.store.append_one(task)
        logger.info(f"➕ Added task: {task.title}")
        return task

    def has_title(self, title: str) -> bool:
        """True if a stored task already uses this title (case-insensitive)"""
        self.reload()
        return self._find(title) is not None

    def list_tasks(
        self,
        filter_type: Optional[str] = None,
        filter_value: Optional[str] = None
    ) -> TaskListing:
        """
        List tasks, optionally filtered by exact match on one field.

        An unknown filter_type with a filter_value is ignored and all
        tasks are returned with invalid_filter set.
        """
        self.reload()

        if not filter_type or not filter_value:
            return TaskListing(tasks=list(self.tasks))

        if filter_type not in FILTER_FIELDS:
            logger.warning(f"Invalid filter type {filter_type!r}; listing all tasks")
            return TaskListing(tasks=list(self.tasks), invalid_filter=True)

        matched = [t for t in self.tasks if t.field_value(filter_type) == filter_value]
        return TaskListing(tasks=matched, filter_applied=True)

    def delete_task(self, title: str) -> bool:
        """Delete the first task with this title; False if none matched"""
        self.reload()

        task = self._find(title)
        if not task:
            logger.warning(f"Task not found: {title}")
            return False

        self.tasks.remove(task)
        self._save()
        logger.info(f"🗑️ Deleted task: {task.title}")
        return True

    def update_task(
        self,
        title: str,
        *,
        new_title: Optional[str] = None,
        description: Optional[str] = None,
        due_date: Optional[Union[str, datetime]] = None,
        priority: Optional[Union[str, TaskPriority]] = None,
        status: Optional[Union[str, TaskStatus]] = None
    ) -> UpdateResult:
        """
        Update fields of the task with this title.

        Blank values keep the current field. Invalid values also keep
        it and are reported in UpdateResult.warnings. The category cannot
        be changed, and the new title is not checked for uniqueness.
        The updated task moves to the end of the list.
        """
        self.reload()

        task = self._find(title)
        if not task:
            logger.warning(f"Task not found: {title}")
            return UpdateResult()

        warnings: List[str] = []
        changes = {}

        for name, value in (("title", new_title), ("description", description)):
            if _is_blank(value):
                continue
            if any(ch in value for ch in FORBIDDEN_TEXT_CHARS):
                warnings.append(f"Ignored {name} containing a comma or line break: {value!r}")
            else:
                changes[name] = value

        if isinstance(due_date, datetime):
            changes["due_date"] = due_date
        elif not _is_blank(due_date):
            parsed = parse_user_date(due_date)
            if parsed is None:
                warnings.append(f"Ignored invalid due date: {due_date!r}")
            else:
                changes["due_date"] = parsed

        for name, enum_cls, value in (
            ("priority", TaskPriority, priority),
            ("status", TaskStatus, status),
        ):
            if _is_blank(value):
                continue
            member = _enum_value(enum_cls, value)
            if member is None:
                warnings.append(f"Ignored invalid {name}: {value!r}")
            else:
                changes[name] = member

        for warning in warnings:
            logger.warning(f"⚠️ {warning} (task {task.title})")

        updated = task.model_copy(update=changes)
        self.tasks.remove(task)
        self.tasks.append(updated)
        self._save()

        logger.info(f"✏️ Updated task: {updated.title}")
        return UpdateResult(task=updated, warnings=warnings)

    def search_tasks(self, keyword: str) -> List[Task]:
        """Tasks whose title or description contains keyword (case-insensitive)"""
        self.reload()
        needle = keyword.casefold()
        return [
            t for t in self.tasks
            if needle in t.title.casefold() or needle in t.description.casefold()
        ]

    # ========================================
    # REPORTING
    # ========================================

    def completion_rate(self) -> Optional[float]:
        """Percentage of completed tasks, or None when there are no tasks"""
        self.reload()
        total = len(self.tasks)
        if total == 0:
            return None
        completed = sum(1 for t in self.tasks if t.status == TaskStatus.COMPLETED)
        return round(completed / total * 100, 2)
