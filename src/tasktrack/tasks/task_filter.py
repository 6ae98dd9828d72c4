# src/tasktrack/tasks/task_filter.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .task_models import ALL, FilterPredicate, Task

NO_DURATION = "no duration available"


def matches_search(task: Task, term: str) -> bool:
    needle = (term or "").lower()
    if not needle:
        return True
    return needle in (task.title or "").lower() or needle in (task.description or "").lower()


def matches_status(task: Task, status: str) -> bool:
    return status == ALL or task.status == status


def matches_priority(task: Task, priority: str) -> bool:
    return priority == ALL or task.priority == priority


def matches(task: Task, predicate: FilterPredicate) -> bool:
    return (
        matches_search(task, predicate.search_term)
        and matches_status(task, predicate.status)
        and matches_priority(task, predicate.priority)
    )


def filter_tasks(tasks: Iterable[Task], predicate: FilterPredicate) -> list[Task]:
    """Full pass over `tasks`; keeps the input order."""
    return [t for t in tasks if matches(t, predicate)]


def _plural(n: int, noun: str) -> str:
    return f"{n} {noun}" if n == 1 else f"{n} {noun}s"


def format_completion_duration(created_at: datetime | None, completed_at: datetime | None) -> str:
    """
    Human-readable time from creation to completion.

    < 1 hour -> minutes, < 1 day -> hours, else days; each truncated to an integer.
    """
    if created_at is None or completed_at is None:
        return NO_DURATION

    # Clock skew between server writes can make this negative.
    minutes = max(0, int((completed_at - created_at).total_seconds() // 60))
    if minutes < 60:
        return _plural(minutes, "minute")

    hours = minutes // 60
    if hours < 24:
        return _plural(hours, "hour")

    return _plural(hours // 24, "day")
