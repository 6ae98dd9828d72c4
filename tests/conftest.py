# tests/conftest.py

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from types import SimpleNamespace

import pytest

from tasktrack.auth.session import SessionManager
from tasktrack.cli.router import Router
from tasktrack.core.state import AppState
from tasktrack.tasks.analytics import AnalyticsView
from tasktrack.tasks.composer import TaskComposer
from tasktrack.tasks.task_board import TaskBoard
from tasktrack.tasks.task_models import Task, TaskPriority, TaskStatus

from .fakes import FakeAIAPI, FakeAuthAPI, FakeTaskAPI, MemoryStorage

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's .env.
    """
    return SimpleNamespace(
        app_name="TaskTrack",
        log_level="DEBUG",
        api_base_url="http://backend.test/api",
        http_connect_timeout=1.0,
        http_read_timeout=1.0,
        ai_enabled=True,
        # Paths (tmp per test run)
        data_dir=tmp_path / "data",
        session_path=tmp_path / "data" / "session.json",
    )


@pytest.fixture()
def sample_tasks() -> list[Task]:
    return [
        Task(id=1, title="Write report", description="Quarterly numbers", priority=TaskPriority.HIGH, created_at=T0),
        Task(
            id=2,
            title="Buy milk",
            description="",
            status=TaskStatus.IN_PROGRESS,
            priority=TaskPriority.LOW,
            created_at=T0,
        ),
        Task(
            id=3,
            title="Fix bug",
            description="Crash in report export",
            status=TaskStatus.DONE,
            created_at=T0,
            completed_at=T0 + timedelta(hours=3, minutes=10),
        ),
    ]


@pytest.fixture()
def auth_api() -> FakeAuthAPI:
    return FakeAuthAPI()


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def task_api(sample_tasks: list[Task]) -> FakeTaskAPI:
    return FakeTaskAPI(sample_tasks)


@pytest.fixture()
def ai_api() -> FakeAIAPI:
    return FakeAIAPI()


@pytest.fixture()
def sessions(auth_api: FakeAuthAPI, storage: MemoryStorage) -> SessionManager:
    return SessionManager(auth_api, storage)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    sessions: SessionManager,
    task_api: FakeTaskAPI,
    ai_api: FakeAIAPI,
) -> AppState:
    """AppState wired the same way bootstrap does it, with deterministic fakes behind the ports."""
    board = TaskBoard(task_api)

    async def _reload(_task: Task) -> None:
        await board.load_tasks()

    composer = TaskComposer(task_api, ai_api, on_saved=_reload)

    def _on_session(session) -> None:
        if session is None:
            board.clear()
            composer.start_new()

    sessions.subscribe(_on_session)

    return AppState(
        settings=settings,
        sessions=sessions,
        router=Router(sessions),
        board=board,
        composer=composer,
        analytics=AnalyticsView(task_api, ai_api),
        ai=ai_api,
    )
