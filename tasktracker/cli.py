#!/usr/bin/env python3
"""
TASK TRACKER - CLI Interface
============================
Interactive menu and one-shot commands over a tasks.txt file.

Usage:
    tasktracker                                   Interactive menu
    tasktracker list --priority High
    tasktracker search milk
    tasktracker add --title "Buy milk" --description "2 litres" \\
        --due "2026-10-20 18:00" --priority Low --status Pending --category Personal
    tasktracker update "Buy milk" --status Completed
    tasktracker delete "Buy milk"
    tasktracker rate
"""

import argparse
import logging
import os
import sys
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional, Type, TypeVar

from .manager import TaskManager, parse_user_date
from .schema import (
    Task, TaskCategory, TaskPriority, TaskStatus, UpdateResult, FILTER_FIELDS, FORBIDDEN_TEXT_CHARS
)
from .store import DEFAULT_TASKS_FILE, FormatError, TaskStore

SEPARATOR = "*" * 81
MISSING_FILE_NOTE = "Task file does not exist. Starting with an empty task list."

E = TypeVar("E", bound=Enum)

MENU = """
Task Manager Menu:
1. Add Task
2. View Tasks
3. Update Task
4. Delete Task
5. Search Tasks
6. View Completion Rate
7. Exit"""


def _choices(enum_cls: Type) -> str:
    return ", ".join(m.value for m in enum_cls)


def _has_delimiter(value: str) -> bool:
    return any(ch in value for ch in FORBIDDEN_TEXT_CHARS)


# ========================================
# DISPLAY
# ========================================

def print_tasks(tasks: Iterable[Task]) -> None:
    for task in tasks:
        print(task)
        print(SEPARATOR)


def show_listing(manager: TaskManager, filter_type: Optional[str], filter_value: Optional[str]) -> None:
    if not filter_type or not filter_value:
        print("No filter applied")

    listing = manager.list_tasks(filter_type, filter_value)
    if listing.invalid_filter:
        print("Invalid filter type. Displaying all tasks.")

    if not listing.tasks:
        print("No tasks found.")
        return
    print_tasks(listing.tasks)


def show_search(manager: TaskManager, keyword: str) -> None:
    results = manager.search_tasks(keyword)
    if not results:
        print("No tasks found matching the keyword.")
        return
    print_tasks(results)


def show_completion_rate(manager: TaskManager) -> None:
    rate = manager.completion_rate()
    if rate is None:
        print("No tasks available to calculate completion rate.")
        return
    print(f"Completion Rate: {rate:.2f}%")


# ========================================
# PROMPTS
# ========================================

def prompt_title(manager: TaskManager) -> str:
    while True:
        title = input("Enter Title: ").strip()
        if not title:
            print("Title cannot be empty. Please try again.")
        elif _has_delimiter(title):
            print("Title cannot contain commas. Please try again.")
        elif manager.has_title(title):
            print("A task with this title already exists. Please choose a different title.")
        else:
            return title


def prompt_text(label: str) -> str:
    while True:
        value = input(f"Enter {label}: ").strip()
        if not value:
            print(f"{label} cannot be empty. Please try again.")
        elif _has_delimiter(value):
            print(f"{label} cannot contain commas. Please try again.")
        else:
            return value


def prompt_due_date() -> datetime:
    while True:
        due = parse_user_date(input("Enter Due Date (yyyy-MM-dd HH:mm): "))
        if due is not None:
            return due
        print("Invalid date format. Please try again (yyyy-MM-dd HH:mm).")


def prompt_choice(label: str, enum_cls: Type[E]) -> E:
    while True:
        value = input(f"Enter {label} ({_choices(enum_cls)}): ").strip()
        try:
            return enum_cls(value)
        except ValueError:
            print(f"{label} must be one of: {_choices(enum_cls)}. Please try again.")


# ========================================
# MENU ACTIONS
# ========================================

def menu_add(manager: TaskManager) -> None:
    task = Task(
        title=prompt_title(manager),
        description=prompt_text("Description"),
        due_date=prompt_due_date(),
        priority=prompt_choice("Priority", TaskPriority),
        status=prompt_choice("Status", TaskStatus),
        category=prompt_choice("Category", TaskCategory),
    )
    manager.add_task(task)
    print("Task added successfully!")


def menu_view(manager: TaskManager) -> None:
    filter_type = input("Filter by (status/priority/category/none): ").strip().lower()
    filter_value = None
    if filter_type in FILTER_FIELDS:
        filter_value = input(f"Enter {filter_type}: ").strip()
    show_listing(manager, filter_type, filter_value)


def menu_update(manager: TaskManager) -> None:
    title = input("Enter Task Title to update: ").strip()
    if not manager.has_title(title):
        print("Task not found.")
        return

    print("Leave fields empty to keep current value.")
    result = manager.update_task(
        title,
        new_title=input("New Title: "),
        description=input("New Description: "),
        due_date=input("New Due Date (yyyy-MM-dd HH:mm): "),
        priority=input(f"New Priority ({_choices(TaskPriority)}): "),
        status=input(f"New Status ({_choices(TaskStatus)}): "),
    )
    _report_update(result)


def menu_delete(manager: TaskManager) -> None:
    title = input("Enter Task Title to delete: ").strip()
    if manager.delete_task(title):
        print("Task deleted successfully!")
    else:
        print("Task not found.")


def menu_search(manager: TaskManager) -> None:
    show_search(manager, input("Enter keyword to search: ").strip())


MENU_ACTIONS = {
    "1": menu_add,
    "2": menu_view,
    "3": menu_update,
    "4": menu_delete,
    "5": menu_search,
    "6": show_completion_rate,
}


def run_menu(manager: TaskManager) -> int:
    """Numbered menu loop; returns the process exit code"""
    try:
        while True:
            print(MENU)
            choice = input("Enter your choice: ").strip()
            if choice == "7":
                print("Exiting...")
                return 0

            action = MENU_ACTIONS.get(choice)
            if not action:
                print("Invalid choice. Try again.")
                continue

            try:
                action(manager)
            except FormatError as e:
                print(f"❌ Task file is malformed: {e}")
    except (KeyboardInterrupt, EOFError):
        print("\nExiting...")
        return 0


def _report_update(result: UpdateResult) -> bool:
    if not result.found:
        print("Task not found.")
        return False
    for warning in result.warnings:
        print(f"⚠️ {warning} (kept current value)")
    print("Task updated successfully!")
    return True


# ========================================
# ONE-SHOT COMMANDS
# ========================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tasktracker",
        description="Task Tracker - tasks stored in a flat text file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tasktracker                               Interactive menu
  tasktracker list --status Pending         List pending tasks
  tasktracker search report                 Search titles and descriptions
  tasktracker update "Pay rent" --status Completed
  tasktracker delete "Pay rent"
  tasktracker rate                          Show completion rate
        """
    )
    parser.add_argument(
        "--file",
        default=os.environ.get("TASKTRACKER_FILE", DEFAULT_TASKS_FILE),
        help="Task file (default: $TASKTRACKER_FILE or tasks.txt)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log informational messages")

    subparsers = parser.add_subparsers(dest="command", help="Commands (omit for the interactive menu)")

    # ADD command
    add_parser = subparsers.add_parser("add", help="Add a task")
    add_parser.add_argument("--title", required=True)
    add_parser.add_argument("--description", required=True)
    add_parser.add_argument("--due", required=True, help="Due date (YYYY-MM-DD HH:MM)")
    add_parser.add_argument("--priority", required=True, choices=[m.value for m in TaskPriority])
    add_parser.add_argument("--status", required=True, choices=[m.value for m in TaskStatus])
    add_parser.add_argument("--category", required=True, choices=[m.value for m in TaskCategory])

    # LIST command
    list_parser = subparsers.add_parser("list", help="List tasks")
    filters = list_parser.add_mutually_exclusive_group()
    for name in FILTER_FIELDS:
        filters.add_argument(f"--{name}", help=f"Only tasks with this {name}")

    # SEARCH command
    search_parser = subparsers.add_parser("search", help="Search titles and descriptions")
    search_parser.add_argument("keyword")

    # UPDATE command
    update_parser = subparsers.add_parser("update", help="Update a task (category is fixed)")
    update_parser.add_argument("title", help="Title of the task to update")
    update_parser.add_argument("--title", dest="new_title", help="New title")
    update_parser.add_argument("--description", help="New description")
    update_parser.add_argument("--due", help="New due date")
    update_parser.add_argument("--priority", help="New priority")
    update_parser.add_argument("--status", help="New status")

    # DELETE command
    delete_parser = subparsers.add_parser("delete", help="Delete a task")
    delete_parser.add_argument("title")

    # RATE command
    subparsers.add_parser("rate", help="Show completion rate")

    return parser


def run_command(args: argparse.Namespace, manager: TaskManager) -> int:
    if args.command == "add":
        title = args.title.strip()
        description = args.description.strip()
        if not title or not description:
            print("❌ Title and description cannot be empty")
            return 1
        if _has_delimiter(title) or _has_delimiter(description):
            print("❌ Title and description cannot contain commas or line breaks")
            return 1
        due = parse_user_date(args.due)
        if due is None:
            print(f"❌ Invalid due date: {args.due}")
            return 1
        if manager.has_title(title):
            print(f"❌ A task with this title already exists: {title}")
            return 1
        manager.add_task(Task(
            title=title,
            description=description,
            due_date=due,
            priority=args.priority,
            status=args.status,
            category=args.category,
        ))
        print("Task added successfully!")

    elif args.command == "list":
        filter_type = next((name for name in FILTER_FIELDS if getattr(args, name)), None)
        filter_value = getattr(args, filter_type) if filter_type else None
        show_listing(manager, filter_type, filter_value)

    elif args.command == "search":
        show_search(manager, args.keyword)

    elif args.command == "update":
        result = manager.update_task(
            args.title,
            new_title=args.new_title,
            description=args.description,
            due_date=args.due,
            priority=args.priority,
            status=args.status,
        )
        if not _report_update(result):
            return 1

    elif args.command == "delete":
        if not manager.delete_task(args.title):
            print("Task not found.")
            return 1
        print("Task deleted successfully!")

    elif args.command == "rate":
        show_completion_rate(manager)

    return 0


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    store = TaskStore(args.file)
    if not store.path.exists():
        print(MISSING_FILE_NOTE)
    manager = TaskManager(store)

    if not args.command:
        return run_menu(manager)

    try:
        return run_command(args, manager)
    except FormatError as e:
        print(f"❌ Task file is malformed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
