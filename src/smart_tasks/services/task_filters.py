"""Filtering and sorting for the task list."""

from datetime import datetime

from smart_tasks.schemas import Category, Priority, Task

FILTERS = ["all", "active", "completed"] + [c.value.lower() for c in Category]
SORT_KEYS = ["date", "priority", "created"]

PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


def filter_tasks(tasks: list[Task], name: str = "all") -> list[Task]:
    """Select tasks by status ("all", "active", "completed") or category name."""
    key = name.lower()
    if key == "all":
        return list(tasks)
    if key == "active":
        return [t for t in tasks if not t.completed]
    if key == "completed":
        return [t for t in tasks if t.completed]

    for category in Category:
        if category.value.lower() == key:
            return [t for t in tasks if t.category == category]

    raise ValueError(f"Unknown filter {name!r}; expected one of {', '.join(FILTERS)}")


def _date_key(task: Task) -> tuple[bool, datetime, str]:
    # Undated tasks sort last
    if task.due_date is None:
        return (True, datetime.min, "")
    return (False, task.due_date.replace(tzinfo=None), task.due_time or "")


def sort_tasks(tasks: list[Task], key: str = "date") -> list[Task]:
    if key == "date":
        return sorted(tasks, key=_date_key)
    if key == "priority":
        return sorted(tasks, key=lambda t: PRIORITY_ORDER[t.priority])
    if key == "created":
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)
    raise ValueError(f"Unknown sort key {key!r}; expected one of {', '.join(SORT_KEYS)}")
