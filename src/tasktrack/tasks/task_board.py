# src/tasktrack/tasks/task_board.py

"""
Task list view state.

Holds the cached task set fetched from the backend and the current filter
predicate, and keeps `visible` (the filtered view) in sync. The view is
recomputed with a full pass on every reload and every filter change.

Overlapping loads are not sequenced: whichever response arrives last wins.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..core.errors import OperationFailure
from ..core.ports import TaskAPI
from .task_filter import filter_tasks
from .task_models import ALL, FilterPredicate, Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

STATUS_CHOICES = (ALL, *(s.value for s in TaskStatus))
PRIORITY_CHOICES = (ALL, *(p.value for p in TaskPriority))


def _normalize_choice(raw: str, choices: tuple[str, ...], what: str) -> str:
    value = (raw or "").strip().upper()
    if value not in choices:
        raise ValueError(f"Unknown {what} filter {raw!r}; expected one of: {', '.join(choices)}")
    return value


class TaskBoard:
    def __init__(self, task_api: TaskAPI) -> None:
        self._api = task_api
        self.tasks: list[Task] = []
        self.predicate = FilterPredicate()
        self.visible: list[Task] = []

    # ---- backend ----

    async def load_tasks(self, *, status: str | None = None, priority: str | None = None) -> list[Task]:
        """
        Replace the cache from the backend (optionally a server-side status/priority subset).
        On failure the cache is left as it was and OperationFailure propagates.
        """
        try:
            tasks = await self._api.list_tasks(status=status, priority=priority)
        except OperationFailure:
            logger.exception("Error loading tasks")
            raise
        self.tasks = list(tasks)
        self.apply_filters()
        logger.info("Loaded %d tasks (%d visible)", len(self.tasks), len(self.visible))
        return self.visible

    async def fetch_task(self, task_id: int) -> Task:
        return await self._api.get_task(task_id)

    async def delete_task(self, task_id: int) -> None:
        """Delete on the backend, then reload. Nothing changes locally if the delete fails."""
        try:
            await self._api.delete_task(task_id)
        except OperationFailure:
            logger.exception("Error deleting task id=%s", task_id)
            raise
        logger.info("Deleted task id=%s", task_id)
        try:
            await self.load_tasks()
        except OperationFailure:
            # The delete went through; drop it from the stale cache until the next reload.
            self.tasks = [t for t in self.tasks if t.id != task_id]
            self.apply_filters()

    def clear(self) -> None:
        """Forget the cached tasks (e.g. after logout) and reset the filters."""
        self.tasks = []
        self.predicate = FilterPredicate()
        self.visible = []

    # ---- filters ----

    def apply_filters(self) -> list[Task]:
        self.visible = filter_tasks(self.tasks, self.predicate)
        return self.visible

    def set_search_term(self, term: str) -> list[Task]:
        self.predicate = replace(self.predicate, search_term=term or "")
        return self.apply_filters()

    def set_status_filter(self, status: str) -> list[Task]:
        self.predicate = replace(self.predicate, status=_normalize_choice(status, STATUS_CHOICES, "status"))
        return self.apply_filters()

    def set_priority_filter(self, priority: str) -> list[Task]:
        self.predicate = replace(
            self.predicate, priority=_normalize_choice(priority, PRIORITY_CHOICES, "priority")
        )
        return self.apply_filters()

    def reset_filters(self) -> list[Task]:
        self.predicate = FilterPredicate()
        return self.apply_filters()

    # ---- lookups ----

    def find(self, task_id: int) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None
