"""
TASK TRACKER - Task Store
=========================
Flat text persistence: one record per task, fields in the order
title, description, due_date, priority, status, category.

There is no quoting or escaping: Task rejects commas and line breaks
in its text fields, so every record is plain comma-joined text.
"""

import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Iterable, List

from pydantic import ValidationError

from .schema import Task

logger = logging.getLogger("tasktracker.store")

DEFAULT_TASKS_FILE = "tasks.txt"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
FIELD_COUNT = 6
DELIMITER = ","

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}")


class FormatError(ValueError):
    """A stored record could not be parsed into a task"""

    def __init__(self, message: str, line_number: int = 0):
        super().__init__(message)
        self.line_number = line_number


def parse_due_date(value: str) -> datetime:
    """Parse the stored due date; only YYYY-MM-DD HH:MM:SS is accepted"""
    if not _DATE_RE.fullmatch(value):
        raise ValueError(f"The string {value} is not a valid date.")
    return datetime.strptime(value, DATE_FORMAT)


def task_to_line(task: Task) -> str:
    return DELIMITER.join([
        task.title,
        task.description,
        task.due_date.strftime(DATE_FORMAT),
        task.priority.value,
        task.status.value,
        task.category.value,
    ])


def line_to_task(line: str, line_number: int = 0) -> Task:
    """Build a task from one stored line (extra trailing fields are ignored)"""
    record = line.split(DELIMITER)
    if len(record) < FIELD_COUNT:
        raise FormatError(
            f"Line {line_number}: each line must have at least {FIELD_COUNT} fields "
            f"(found {len(record)}).",
            line_number,
        )

    title, description, due, priority, status, category = record[:FIELD_COUNT]

    try:
        due_date = parse_due_date(due)
    except ValueError as e:
        raise FormatError(f"Line {line_number}: {e}", line_number) from e

    try:
        return Task(
            title=title,
            description=description,
            due_date=due_date,
            priority=priority,
            status=status,
            category=category,
        )
    except ValidationError as e:
        raise FormatError(
            f"Line {line_number}: invalid task fields ({e.error_count()} errors)",
            line_number,
        ) from e


class TaskStore:
    """
    Backing file for the task collection.

    Every write opens, writes and closes the file before returning, so
    nothing is buffered between calls. There is no cross-process locking.
    """

    def __init__(self, path: str = DEFAULT_TASKS_FILE, encoding: str = "utf-8"):
        self.path = Path(path)
        self.encoding = encoding

    def load_all(self) -> List[Task]:
        """Load every task; a missing file is an empty collection"""
        if not self.path.exists():
            logger.info(f"Task file {self.path} does not exist. Starting with an empty task list.")
            return []

        tasks = []
        with open(self.path, "r", encoding=self.encoding) as f:
            for line_number, line in enumerate(f, start=1):
                line = line.rstrip("\n")
                if not line:
                    continue
                tasks.append(line_to_task(line, line_number))

        logger.info(f"📂 Loaded {len(tasks)} tasks from {self.path}")
        return tasks

    def append_one(self, task: Task) -> None:
        """Append one task, creating the file if needed"""
        self._write_lines([task_to_line(task)], mode="a")
        logger.debug(f"Appended task: {task.title}")

    def overwrite_all(self, tasks: Iterable[Task]) -> None:
        """Truncate the file, then append every task in order"""
        self._write_lines([], mode="w")
        count = 0
        for task in tasks:
            self._write_lines([task_to_line(task)], mode="a")
            count += 1
        logger.info(f"✅ Saved {count} tasks to {self.path}")

    def _write_lines(self, lines: List[str], mode: str) -> None:
        with open(self.path, mode, encoding=self.encoding, newline="") as f:
            for line in lines:
                f.write(line + os.linesep)
