# src/tasktrack/tasks/composer.py

"""
Task composition: the create/edit form, with optional AI assistance.

Manual entry always works. AI affordances (natural-language parse, priority
recommendation) are layered on top and are only offered after the AI status
probe has reported the collaborator as available.

Key invariants:
- a parse is one-shot: it either applies the AI result (with per-field
  fallbacks) or falls back to "free text becomes the title"; either way the
  natural-language input mode is closed afterwards, and nothing is retried,
- a failed priority recommendation leaves the draft untouched and is only logged,
- a failed save leaves the draft as it was so the user can retry.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ..core.errors import CollaboratorUnavailable, OperationFailure
from ..core.ports import AIAPI, TaskAPI
from .task_models import AIStatus, Task, TaskPriority, TaskStatus

logger = logging.getLogger(__name__)

TaskSavedCallback = Callable[[Task], Awaitable[None]]


@dataclass(slots=True)
class TaskDraft:
    title: str = ""
    description: str = ""
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    task_id: int | None = None

    @property
    def is_edit(self) -> bool:
        return self.task_id is not None

    @classmethod
    def from_task(cls, task: Task) -> TaskDraft:
        return cls(
            title=task.title,
            description=task.description or "",
            status=task.status,
            priority=task.priority,
            task_id=task.id,
        )

    def to_task(self) -> Task:
        return Task(
            id=self.task_id,
            title=self.title.strip(),
            description=self.description,
            status=self.status,
            priority=self.priority,
        )


class TaskComposer:
    def __init__(
        self,
        task_api: TaskAPI,
        ai_api: AIAPI,
        *,
        on_saved: TaskSavedCallback | None = None,
    ) -> None:
        self._task_api = task_api
        self._ai_api = ai_api
        self._on_saved = on_saved

        self.draft = TaskDraft()
        self.ai_available = False
        self.ai_status: AIStatus | None = None
        self.nl_mode = False
        self.nl_input = ""
        self.is_parsing = False
        self.is_submitting = False

    # ---- form lifecycle ----

    def start_new(self) -> TaskDraft:
        self.draft = TaskDraft()
        self.nl_mode = False
        self.nl_input = ""
        return self.draft

    def start_edit(self, task: Task) -> TaskDraft:
        if task.id is None:
            raise ValueError("Cannot edit a task that has no id yet")
        self.draft = TaskDraft.from_task(task)
        self.nl_mode = False
        self.nl_input = ""
        return self.draft

    # ---- AI availability ----

    async def check_ai_availability(self) -> bool:
        """Status probe. Advisory only: any failure just hides the AI affordances."""
        try:
            status = await self._ai_api.status()
        except CollaboratorUnavailable as e:
            logger.info("AI unavailable: %s", e)
            self.ai_status = None
            self.ai_available = False
            return False
        except Exception:
            logger.exception("AI status probe failed")
            self.ai_status = None
            self.ai_available = False
            return False

        self.ai_status = status
        self.ai_available = bool(status.available)
        logger.debug(
            "AI status available=%s provider=%s model=%s", status.available, status.provider, status.model
        )
        return self.ai_available

    def _require_ai(self) -> None:
        if not self.ai_available:
            raise CollaboratorUnavailable("AI assistance is not available.")

    # ---- natural-language parse ----

    def toggle_natural_language_input(self) -> bool:
        self._require_ai()
        self.nl_mode = not self.nl_mode
        if self.nl_mode:
            self.nl_input = ""
        return self.nl_mode

    async def parse_with_ai(self, text: str | None = None) -> bool:
        """
        Turn free text into title/description/priority.

        Returns True if the AI result was applied, False if the free-text fallback
        was used (or the text was blank, which is a no-op).
        """
        self._require_ai()
        if text is not None:
            self.nl_input = text
        free_text = self.nl_input
        if not free_text.strip():
            return False

        self.is_parsing = True
        try:
            result = await self._ai_api.parse_task(free_text)
        except Exception as e:
            logger.warning("AI parsing failed, using input as title: %s", e)
            self.draft.title = free_text
            return False
        finally:
            self.is_parsing = False
            self.nl_mode = False

        self.draft.title = result.title or free_text
        self.draft.description = result.description or ""
        self.draft.priority = result.priority or TaskPriority.MEDIUM
        logger.info("AI parse applied (priority=%s)", self.draft.priority.value)
        return True

    # ---- priority recommendation ----

    async def recommend_priority(self) -> TaskPriority | None:
        """Overwrite only the priority. Failures are logged and leave the draft alone."""
        self._require_ai()
        if not self.draft.title.strip():
            return None

        try:
            rec = await self._ai_api.recommend_priority(self.draft.title, self.draft.description or None)
        except Exception:
            logger.exception("AI priority recommendation failed")
            return None

        self.draft.priority = rec.recommended_priority
        return rec.recommended_priority

    # ---- save ----

    async def submit(self) -> Task:
        """
        Create or update the task on the backend.

        Raises ValueError for an empty title and OperationFailure when the backend
        call fails; in both cases the draft is kept as-is.
        """
        if not self.draft.title.strip():
            raise ValueError("Title is required")

        task = self.draft.to_task()
        task_id = self.draft.task_id
        self.is_submitting = True
        try:
            if task_id is not None:
                saved = await self._task_api.update_task(task_id, task)
                logger.info("Updated task id=%s", task_id)
            else:
                saved = await self._task_api.create_task(task)
                logger.info("Created task id=%s", saved.id)
        except OperationFailure:
            logger.exception("Error %s task", "updating" if task_id is not None else "creating")
            raise
        finally:
            self.is_submitting = False

        if self._on_saved is not None:
            try:
                await self._on_saved(saved)
            except OperationFailure:
                logger.warning("Task saved but refresh afterwards failed.")
        self.start_new()
        return saved
