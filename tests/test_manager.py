# tests/test_manager.py

from __future__ import annotations

from datetime import datetime

import pytest

from tasktracker.manager import TaskManager, parse_user_date
from tasktracker.schema import TaskCategory, TaskPriority, TaskStatus
from tasktracker.store import FormatError, TaskStore


@pytest.fixture()
def seeded(manager: TaskManager, make_task) -> TaskManager:
    manager.add_task(make_task("Buy Milk", priority="Low", status="Pending", category="Personal"))
    manager.add_task(make_task("Pay rent", description="Transfer to landlord", priority="High",
                               status="Completed", category="Personal"))
    manager.add_task(make_task("Finish essay", description="History of milk", priority="High",
                               status="In Progress", category="Study"))
    return manager


# ========================================
# add / has_title
# ========================================

def test_add_persists_immediately(manager: TaskManager, store: TaskStore, make_task) -> None:
    task = manager.add_task(make_task())

    assert manager.tasks == [task]
    assert store.load_all() == [task]


def test_add_does_not_reject_duplicate_titles(manager: TaskManager, store: TaskStore, make_task) -> None:
    manager.add_task(make_task("Buy milk"))
    manager.add_task(make_task("BUY MILK"))

    assert len(store.load_all()) == 2


def test_has_title_is_case_insensitive(seeded: TaskManager) -> None:
    assert seeded.has_title("buy milk")
    assert not seeded.has_title("buy bread")


def test_manager_rereads_external_changes(manager: TaskManager, make_task) -> None:
    other = TaskManager(TaskStore(str(manager.store.path)))
    other.add_task(make_task("Added elsewhere"))

    assert [t.title for t in manager.list_tasks().tasks] == ["Added elsewhere"]


# ========================================
# list_tasks
# ========================================

def test_list_without_filter_returns_everything(seeded: TaskManager) -> None:
    listing = seeded.list_tasks()

    assert len(listing.tasks) == 3
    assert not listing.filter_applied
    assert not listing.invalid_filter


def test_list_filter_by_priority(manager: TaskManager, make_task) -> None:
    manager.add_task(make_task("High one", priority="High"))
    manager.add_task(make_task("Low one", priority="Low"))

    listing = manager.list_tasks(filter_type="priority", filter_value="High")

    assert [t.title for t in listing.tasks] == ["High one"]
    assert listing.filter_applied


def test_list_filter_by_status_and_category(seeded: TaskManager) -> None:
    assert [t.title for t in seeded.list_tasks("status", "In Progress").tasks] == ["Finish essay"]
    assert [t.title for t in seeded.list_tasks("category", "Personal").tasks] == ["Buy Milk", "Pay rent"]


def test_list_filter_is_case_sensitive(seeded: TaskManager) -> None:
    listing = seeded.list_tasks("priority", "high")

    assert listing.filter_applied
    assert listing.tasks == []


def test_list_unknown_filter_type_returns_everything(seeded: TaskManager) -> None:
    listing = seeded.list_tasks("colour", "Red")

    assert len(listing.tasks) == 3
    assert listing.invalid_filter
    assert not listing.filter_applied


def test_list_missing_value_ignores_filter(seeded: TaskManager) -> None:
    listing = seeded.list_tasks("status", None)

    assert len(listing.tasks) == 3
    assert not listing.filter_applied


def test_unfiltered_list_unaffected_by_prior_filter(seeded: TaskManager) -> None:
    seeded.list_tasks("priority", "Low")

    assert len(seeded.list_tasks().tasks) == 3


# ========================================
# delete_task
# ========================================

def test_delete_is_case_insensitive(seeded: TaskManager, store: TaskStore) -> None:
    assert seeded.delete_task("pay RENT")

    assert [t.title for t in store.load_all()] == ["Buy Milk", "Finish essay"]


def test_delete_missing_title_leaves_file_untouched(seeded: TaskManager, tasks_path) -> None:
    before = tasks_path.read_bytes()

    assert not seeded.delete_task("ghost-title")
    assert tasks_path.read_bytes() == before


# ========================================
# update_task
# ========================================

def test_update_changes_supplied_fields_and_moves_task_last(seeded: TaskManager, store: TaskStore) -> None:
    result = seeded.update_task(
        "buy milk",
        new_title="Buy oat milk",
        due_date="2026-12-01 08:15",
        status="Completed",
    )

    assert result.found
    assert result.warnings == []
    stored = store.load_all()
    assert [t.title for t in stored] == ["Pay rent", "Finish essay", "Buy oat milk"]
    updated = stored[-1]
    assert updated.status is TaskStatus.COMPLETED
    assert updated.due_date == datetime(2026, 12, 1, 8, 15)
    assert updated.priority is TaskPriority.LOW
    assert updated.description == "Two litres from the corner shop"


def test_update_blank_values_keep_old_fields(seeded: TaskManager, store: TaskStore) -> None:
    before = {t.title: t for t in store.load_all()}["Pay rent"]

    result = seeded.update_task("Pay rent", new_title="", description="  ", due_date="", priority="", status="")

    assert result.warnings == []
    assert result.task == before


def test_update_invalid_values_are_ignored_with_warnings(seeded: TaskManager, store: TaskStore) -> None:
    result = seeded.update_task("Pay rent", due_date="next tuesday", priority="Urgent", description="Bank transfer")

    assert result.found
    assert len(result.warnings) == 2
    stored = {t.title: t for t in store.load_all()}["Pay rent"]
    assert stored.description == "Bank transfer"
    assert stored.priority is TaskPriority.HIGH
    assert stored.due_date == datetime(2026, 10, 20, 18, 30, 0)


def test_update_cannot_change_category(seeded: TaskManager) -> None:
    with pytest.raises(TypeError):
        seeded.update_task("Pay rent", category="Work")

    assert {t.title: t for t in seeded.list_tasks().tasks}["Pay rent"].category is TaskCategory.PERSONAL


def test_update_accepts_datetime_and_enum_members(seeded: TaskManager) -> None:
    due = datetime(2027, 1, 1, 0, 0, 0)
    result = seeded.update_task("Finish essay", due_date=due, status=TaskStatus.COMPLETED)

    assert result.task.due_date == due
    assert result.task.status is TaskStatus.COMPLETED


def test_update_missing_title_reports_not_found(seeded: TaskManager, tasks_path) -> None:
    before = tasks_path.read_bytes()

    result = seeded.update_task("ghost-title", status="Completed")

    assert not result.found
    assert tasks_path.read_bytes() == before


# ========================================
# search_tasks / completion_rate
# ========================================

def test_search_matches_title_case_insensitively(manager: TaskManager, make_task) -> None:
    manager.add_task(make_task("Buy Milk", description="Groceries"))
    manager.add_task(make_task("Pay rent", description="Landlord"))

    assert [t.title for t in manager.search_tasks("milk")] == ["Buy Milk"]


def test_search_matches_description(seeded: TaskManager) -> None:
    assert [t.title for t in seeded.search_tasks("MILK")] == ["Buy Milk", "Finish essay"]
    assert seeded.search_tasks("nothing like this") == []


def test_completion_rate_example(manager: TaskManager, make_task) -> None:
    manager.add_task(make_task("Buy milk", status="Pending"))
    manager.add_task(make_task("Pay rent", status="Completed"))

    assert manager.completion_rate() == 50.0


def test_completion_rate_rounds_to_two_places(seeded: TaskManager) -> None:
    assert seeded.completion_rate() == 33.33


def test_completion_rate_without_tasks_is_none(manager: TaskManager) -> None:
    assert manager.completion_rate() is None


def test_malformed_store_propagates(manager: TaskManager, tasks_path) -> None:
    tasks_path.write_text("only,three,fields\n", encoding="utf-8")

    with pytest.raises(FormatError):
        manager.list_tasks()
    with pytest.raises(FormatError):
        manager.completion_rate()


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2026-10-20 18:30:15", datetime(2026, 10, 20, 18, 30, 15)),
        ("2026-10-20 18:30", datetime(2026, 10, 20, 18, 30)),
        ("2026-10-20T18:30", datetime(2026, 10, 20, 18, 30)),
        ("2026-10-20", datetime(2026, 10, 20)),
        ("tomorrow", None),
    ],
)
def test_parse_user_date(value: str, expected) -> None:
    assert parse_user_date(value) == expected


def test_update_ignores_text_with_record_delimiters(seeded: TaskManager, store: TaskStore) -> None:
    result = seeded.update_task("Pay rent", new_title="Pay rent, then relax", description="Line\nbreak")

    assert len(result.warnings) == 2
    stored = store.load_all()
    assert [t.title for t in stored] == ["Buy Milk", "Finish essay", "Pay rent"]
    assert stored[-1].description == "Transfer to landlord"
