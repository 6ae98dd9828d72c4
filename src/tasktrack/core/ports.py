# src/tasktrack/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the HTTP backends swappable and makes testing easier
(tests/fakes.py provides in-memory versions of every port).
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..auth.models import LoginResponse, Session
    from ..tasks.task_models import (
        AIParseResult,
        AIStatus,
        PriorityRecommendation,
        Task,
        TaskStats,
        TaskSuggestions,
    )


class AuthAPI(Protocol):
    """Raises AuthenticationError when credentials are rejected."""

    async def login(self, username: str, password: str) -> LoginResponse: ...


class TaskAPI(Protocol):
    """Task backend. Every method raises OperationFailure on a failed call."""

    async def list_tasks(self, *, status: str | None = None, priority: str | None = None) -> list[Task]: ...
    async def get_task(self, task_id: int) -> Task: ...
    async def create_task(self, task: Task) -> Task: ...
    async def update_task(self, task_id: int, task: Task) -> Task: ...
    async def delete_task(self, task_id: int) -> None: ...
    async def get_stats(self) -> TaskStats: ...


class AIAPI(Protocol):
    """
    AI collaborator.

    parse_task() raises OperationFailure for any failed call or any response that
    doesn't decode into an AIParseResult; status() raises CollaboratorUnavailable
    when the probe itself fails.
    """

    async def status(self) -> AIStatus: ...
    async def parse_task(self, text: str) -> AIParseResult: ...
    async def recommend_priority(self, title: str, description: str | None = None) -> PriorityRecommendation: ...
    async def productivity_insight(self) -> str: ...
    async def suggestions(self) -> TaskSuggestions: ...


class SessionStorage(Protocol):
    """Single-slot durable storage for the current Session (see CredentialStore)."""

    def save(self, session: Session) -> None: ...
    def load(self) -> Session | None: ...
    def clear(self) -> None: ...


class Navigator(Protocol):
    """Whatever owns the current view; the route guard uses it to redirect."""

    def redirect(self, route: str) -> None: ...
