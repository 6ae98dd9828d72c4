# src/tasktrack/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- builds the single credential store + session manager for the process,
- wires the bearer-token decorator into the task/AI transport,
- assembles the view controllers into AppState.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx

from ..api.ai_api import AIApiClient
from ..api.auth_api import AuthApiClient
from ..api.offline import OfflineAIClient
from ..api.task_api import TaskApiClient
from ..api.transport import ApiTransport, make_timeout
from ..auth.authorizer import bearer_decorator
from ..auth.credential_store import CredentialStore
from ..auth.models import Session
from ..auth.session import SessionManager
from ..config import get_settings
from ..core.ports import AIAPI
from ..core.state import AppState
from ..tasks.analytics import AnalyticsView
from ..tasks.composer import TaskComposer
from ..tasks.task_board import TaskBoard
from ..tasks.task_models import Task
from .router import Router

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.session_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings(). `client_factory` lets tests swap in an
    httpx client backed by MockTransport.

    The session manager is NOT initialized here; callers run sessions.initialize() once.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    timeout = make_timeout(settings.http_connect_timeout, settings.http_read_timeout)

    # Login goes out undecorated; every task/AI call carries the bearer token.
    auth_transport = ApiTransport(settings.api_base_url, timeout=timeout, client_factory=client_factory)
    sessions = SessionManager(AuthApiClient(auth_transport), CredentialStore(settings.session_path))

    api_transport = ApiTransport(
        settings.api_base_url,
        timeout=timeout,
        decorators=[bearer_decorator(sessions)],
        client_factory=client_factory,
    )
    task_api = TaskApiClient(api_transport)

    ai_api: AIAPI
    if settings.ai_enabled:
        ai_api = AIApiClient(api_transport)
    else:
        logger.info("AI features disabled by settings; using offline stand-in.")
        ai_api = OfflineAIClient()

    board = TaskBoard(task_api)

    async def _reload_after_save(_task: Task) -> None:
        await board.load_tasks()

    composer = TaskComposer(task_api, ai_api, on_saved=_reload_after_save)
    analytics = AnalyticsView(task_api, ai_api)
    router = Router(sessions)

    def _on_session(session: Session | None) -> None:
        if session is None:
            board.clear()
            composer.start_new()

    sessions.subscribe(_on_session)

    return AppState(
        settings=settings,
        sessions=sessions,
        router=router,
        board=board,
        composer=composer,
        analytics=analytics,
        ai=ai_api,
        transports=[auth_transport, api_transport],
    )
