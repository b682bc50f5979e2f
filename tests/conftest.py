# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from tasktracker.manager import TaskManager
from tasktracker.schema import Task
from tasktracker.store import TaskStore


@pytest.fixture()
def tasks_path(tmp_path: Path) -> Path:
    return tmp_path / "tasks.txt"


@pytest.fixture()
def store(tasks_path: Path) -> TaskStore:
    return TaskStore(str(tasks_path))


@pytest.fixture()
def manager(store: TaskStore) -> TaskManager:
    return TaskManager(store)


@pytest.fixture()
def make_task():
    """Factory for valid tasks; keyword arguments override the defaults."""

    def _make(title: str = "Buy milk", **overrides) -> Task:
        fields = dict(
            title=title,
            description="Two litres from the corner shop",
            due_date=datetime(2026, 10, 20, 18, 30, 0),
            priority="Medium",
            status="Pending",
            category="Personal",
        )
        fields.update(overrides)
        return Task(**fields)

    return _make
