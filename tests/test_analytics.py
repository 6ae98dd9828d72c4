# tests/test_analytics.py

from __future__ import annotations

import pytest

from tasktrack.api.offline import OfflineAIClient
from tasktrack.tasks.analytics import AnalyticsView, completion_breakdown, status_distribution
from tasktrack.tasks.task_models import TaskStats

from .fakes import FakeAIAPI, FakeTaskAPI


def test_chart_series_from_stats() -> None:
    stats = TaskStats(total_tasks=6, completed_tasks=2, pending_tasks=4, todo_tasks=3, in_progress_tasks=1)

    status = status_distribution(stats)
    completion = completion_breakdown(stats)

    assert status.labels == ("To Do", "In Progress", "Done")
    assert status.values == (3, 1, 2)
    assert completion.labels == ("Pending", "Completed")
    assert completion.values == (4, 2)


@pytest.mark.asyncio
async def test_refresh_loads_stats_and_insight(task_api: FakeTaskAPI, ai_api: FakeAIAPI) -> None:
    view = AnalyticsView(task_api, ai_api)

    await view.refresh()

    assert view.stats == task_api.stats
    assert view.insight == "You finish most tasks within a day."
    assert view.charts() is not None


@pytest.mark.asyncio
async def test_failures_are_swallowed(task_api: FakeTaskAPI, ai_api: FakeAIAPI) -> None:
    view = AnalyticsView(task_api, ai_api)
    task_api.fail = True
    ai_api.fail = True

    await view.refresh()

    assert view.stats is None
    assert view.charts() is None
    assert view.insight == ""


@pytest.mark.asyncio
async def test_insight_skipped_when_ai_offline(task_api: FakeTaskAPI) -> None:
    view = AnalyticsView(task_api, OfflineAIClient())

    assert await view.load_insight() == ""
    assert view.ai_available is False
