# src/tasktrack/tasks/task_models.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

ALL = "ALL"


class TaskStatus(StrEnum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @classmethod
    def from_api(cls, raw: Any) -> TaskStatus:
        if not raw:
            return cls.TODO
        try:
            return cls(str(raw).strip().upper())
        except ValueError:
            logger.debug("Unknown task status from API: %r", raw)
            return cls.TODO


class TaskPriority(StrEnum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @classmethod
    def parse(cls, raw: Any) -> TaskPriority | None:
        """Return the matching priority, or None for absent/unrecognized values."""
        if raw is None:
            return None
        if isinstance(raw, TaskPriority):
            return raw
        try:
            return cls(str(raw).strip().upper())
        except ValueError:
            return None

    @classmethod
    def from_api(cls, raw: Any) -> TaskPriority:
        return cls.parse(raw) or cls.MEDIUM


def parse_timestamp(raw: Any) -> datetime | None:
    """
    Decode a backend timestamp.

    Accepts ISO-8601 strings (trailing "Z" or offset; naive values are taken as UTC)
    and epoch seconds. Anything else is treated as absent.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            return datetime.fromtimestamp(float(raw), tz=UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(raw, str):
        try:
            dt = datetime.fromisoformat(raw.strip())
        except ValueError:
            logger.debug("Unparseable timestamp from API: %r", raw)
            return None
        return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)
    return None


@dataclass(slots=True)
class Task:
    """
    Client-side copy of a backend task.

    `completed_at` is maintained by the backend (set when status becomes DONE);
    the client never derives it.
    """

    title: str
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    id: int | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Task:
        raw_id = data.get("id")
        try:
            task_id = int(raw_id) if raw_id is not None else None
        except (TypeError, ValueError):
            task_id = None
        return cls(
            id=task_id,
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            status=TaskStatus.from_api(data.get("status")),
            priority=TaskPriority.from_api(data.get("priority")),
            created_at=parse_timestamp(data.get("createdAt")),
            completed_at=parse_timestamp(data.get("completedAt")),
        )

    def to_api(self) -> dict[str, Any]:
        """Request body for POST/PUT. Id and timestamps are backend-owned and never sent."""
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
        }


@dataclass(frozen=True, slots=True)
class FilterPredicate:
    """Conjunctive search/status/priority criteria. "ALL" disables a dimension."""

    search_term: str = ""
    status: str = ALL
    priority: str = ALL


@dataclass(frozen=True, slots=True)
class TaskStats:
    total_tasks: int = 0
    completed_tasks: int = 0
    pending_tasks: int = 0
    todo_tasks: int = 0
    in_progress_tasks: int = 0
    average_completion_time_hours: float = 0.0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> TaskStats:
        def _int(key: str) -> int:
            try:
                return int(data.get(key) or 0)
            except (TypeError, ValueError):
                return 0

        try:
            avg = float(data.get("averageCompletionTimeHours") or 0.0)
        except (TypeError, ValueError):
            avg = 0.0

        return cls(
            total_tasks=_int("totalTasks"),
            completed_tasks=_int("completedTasks"),
            pending_tasks=_int("pendingTasks"),
            todo_tasks=_int("todoTasks"),
            in_progress_tasks=_int("inProgressTasks"),
            average_completion_time_hours=avg,
        )


@dataclass(frozen=True, slots=True)
class AIParseResult:
    """Structured fields extracted from free text. Empty/None means "not provided"."""

    title: str
    description: str | None
    priority: TaskPriority | None


@dataclass(frozen=True, slots=True)
class AIStatus:
    available: bool
    provider: str = ""
    model: str = ""
    cost: str = ""


@dataclass(frozen=True, slots=True)
class PriorityRecommendation:
    recommended_priority: TaskPriority
    title: str = ""


@dataclass(frozen=True, slots=True)
class TaskSuggestions:
    suggestions: list[str] = field(default_factory=list)
    insight: str = ""
