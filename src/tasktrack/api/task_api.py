# src/tasktrack/api/task_api.py

from __future__ import annotations

from typing import Any

from ..core.errors import OperationFailure
from ..tasks.task_models import Task, TaskStats
from .transport import ApiTransport


def _task_list(data: Any) -> list[Task]:
    if not isinstance(data, list):
        raise OperationFailure("Unexpected task list response from server")
    return [Task.from_api(item) for item in data if isinstance(item, dict)]


def _task(data: Any) -> Task:
    if not isinstance(data, dict):
        raise OperationFailure("Unexpected task response from server")
    return Task.from_api(data)


class TaskApiClient:
    """
    Task backend (/tasks). All endpoints need a bearer token, added by the
    transport's decorator pipeline; the backend scopes results to that identity.
    """

    def __init__(self, transport: ApiTransport) -> None:
        self._transport = transport

    async def list_tasks(self, *, status: str | None = None, priority: str | None = None) -> list[Task]:
        params: dict[str, str] = {}
        if status:
            params["status"] = str(status)
        if priority:
            params["priority"] = str(priority)
        return _task_list(await self._transport.request_json("GET", "/tasks", params=params))

    async def get_task(self, task_id: int) -> Task:
        return _task(await self._transport.request_json("GET", f"/tasks/{int(task_id)}"))

    async def create_task(self, task: Task) -> Task:
        return _task(await self._transport.request_json("POST", "/tasks", json=task.to_api()))

    async def update_task(self, task_id: int, task: Task) -> Task:
        return _task(await self._transport.request_json("PUT", f"/tasks/{int(task_id)}", json=task.to_api()))

    async def delete_task(self, task_id: int) -> None:
        await self._transport.request_json("DELETE", f"/tasks/{int(task_id)}")

    async def get_stats(self) -> TaskStats:
        data = await self._transport.request_json("GET", "/tasks/stats")
        if not isinstance(data, dict):
            raise OperationFailure("Unexpected stats response from server")
        return TaskStats.from_api(data)
