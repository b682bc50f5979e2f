"""
TASK TRACKER
============

Single-user task tracking persisted to a flat text file.

Usage:
    from tasktracker import TaskManager, TaskStore

    manager = TaskManager(TaskStore("tasks.txt"))
    manager.add_task(task)
    manager.list_tasks("priority", "High")
    manager.update_task("Pay rent", status="Completed")
    print(manager.completion_rate())
"""

from .schema import (
    Task,
    TaskPriority,
    TaskStatus,
    TaskCategory,
    TaskListing,
    UpdateResult,
    FILTER_FIELDS
)

from .store import TaskStore, FormatError, DEFAULT_TASKS_FILE
from .manager import TaskManager

__version__ = "1.0.0"
__all__ = [
    "TaskManager",
    "TaskStore",
    "FormatError",
    "DEFAULT_TASKS_FILE",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "TaskCategory",
    "TaskListing",
    "UpdateResult",
    "FILTER_FIELDS"
]
