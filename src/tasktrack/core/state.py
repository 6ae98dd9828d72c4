# src/tasktrack/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..api.transport import ApiTransport
    from ..auth.session import SessionManager
    from ..cli.router import Router
    from ..tasks.analytics import AnalyticsView
    from ..tasks.composer import TaskComposer
    from ..tasks.task_board import TaskBoard
    from .ports import AIAPI


@dataclass
class AppState:
    """
    Process-wide wiring, built once by cli.bootstrap and passed to every command.

    There is exactly one SessionManager (and behind it one credential store)
    per process; nothing else holds a reference to the store.
    """

    # Store Settings on the state for easy access in other modules later.
    settings: Any

    sessions: SessionManager
    router: Router
    board: TaskBoard
    composer: TaskComposer
    analytics: AnalyticsView
    ai: AIAPI

    transports: list[ApiTransport] = field(default_factory=list)

    async def aclose(self) -> None:
        for t in self.transports:
            await t.aclose()
