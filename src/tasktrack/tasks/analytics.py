# src/tasktrack/tasks/analytics.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.ports import AIAPI, TaskAPI
from .task_models import TaskStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChartSeries:
    labels: tuple[str, ...]
    values: tuple[int, ...]


def status_distribution(stats: TaskStats) -> ChartSeries:
    return ChartSeries(
        labels=("To Do", "In Progress", "Done"),
        values=(stats.todo_tasks, stats.in_progress_tasks, stats.completed_tasks),
    )


def completion_breakdown(stats: TaskStats) -> ChartSeries:
    return ChartSeries(labels=("Pending", "Completed"), values=(stats.pending_tasks, stats.completed_tasks))


class AnalyticsView:
    """
    Completion statistics plus an optional AI productivity insight.

    Both loads are best-effort: a failed stats call leaves `stats` empty,
    a failed or unavailable AI leaves `insight` empty. Nothing here raises.
    """

    def __init__(self, task_api: TaskAPI, ai_api: AIAPI) -> None:
        self._task_api = task_api
        self._ai_api = ai_api
        self.stats: TaskStats | None = None
        self.insight = ""
        self.ai_available = False

    async def load_stats(self) -> TaskStats | None:
        try:
            self.stats = await self._task_api.get_stats()
        except Exception:
            logger.exception("Error loading stats")
        return self.stats

    async def load_insight(self) -> str:
        try:
            status = await self._ai_api.status()
            self.ai_available = bool(status.available)
        except Exception as e:
            logger.info("AI status probe failed: %s", e)
            self.ai_available = False

        if not self.ai_available:
            self.insight = ""
            return self.insight

        try:
            self.insight = await self._ai_api.productivity_insight()
        except Exception:
            logger.exception("Failed to load AI insight")
            self.insight = ""
        return self.insight

    async def refresh(self) -> None:
        await self.load_stats()
        await self.load_insight()

    def charts(self) -> tuple[ChartSeries, ChartSeries] | None:
        if self.stats is None:
            return None
        return status_distribution(self.stats), completion_breakdown(self.stats)
