# src/tasktrack/api/ai_api.py

"""
AI collaborator client (/ai/*).

parse-task is the awkward endpoint: the backend may answer with a JSON object
or with a string that itself contains JSON. Only these two shapes are accepted;
anything else (bare prose, markdown-wrapped JSON, wrong field types, an object
with none of the expected fields) is a parse failure, and the caller falls back
to manual entry instead of guessing.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ..core.errors import CollaboratorUnavailable, OperationFailure
from ..tasks.task_models import (
    AIParseResult,
    AIStatus,
    PriorityRecommendation,
    TaskPriority,
    TaskSuggestions,
)
from .transport import ApiError, ApiTransport

logger = logging.getLogger(__name__)

_PARSE_FIELDS = ("title", "description", "priority")


def decode_parse_result(payload: Any) -> AIParseResult:
    """Strictly decode a parse-task payload. Raises OperationFailure on a non-conforming shape."""
    data = payload
    if isinstance(payload, str):
        try:
            data = json.loads(payload)
        except ValueError as e:
            raise OperationFailure("AI parse response is not JSON") from e

    if not isinstance(data, dict):
        raise OperationFailure("AI parse response is not an object")
    if not any(k in data for k in _PARSE_FIELDS):
        raise OperationFailure("AI parse response has none of title/description/priority")

    for key in _PARSE_FIELDS:
        val = data.get(key)
        if val is not None and not isinstance(val, str):
            raise OperationFailure(f"AI parse response field {key!r} is not a string")

    return AIParseResult(
        title=(data.get("title") or "").strip(),
        description=data.get("description"),
        priority=TaskPriority.parse(data.get("priority")),
    )


class AIApiClient:
    def __init__(self, transport: ApiTransport) -> None:
        self._transport = transport

    async def status(self) -> AIStatus:
        try:
            data = await self._transport.request_json("GET", "/ai/status")
        except ApiError as e:
            raise CollaboratorUnavailable(f"AI status probe failed: {e.message}") from e
        if not isinstance(data, dict):
            raise CollaboratorUnavailable("AI status probe returned an unexpected body")
        return AIStatus(
            available=data.get("available") is True,
            provider=str(data.get("provider") or ""),
            model=str(data.get("model") or ""),
            cost=str(data.get("cost") or ""),
        )

    async def parse_task(self, text: str) -> AIParseResult:
        payload = await self._transport.request_json("POST", "/ai/parse-task", json={"text": text})
        return decode_parse_result(payload)

    async def recommend_priority(self, title: str, description: str | None = None) -> PriorityRecommendation:
        params = {"title": title}
        if description:
            params["description"] = description
        data = await self._transport.request_json("GET", "/ai/recommend-priority", params=params)
        if not isinstance(data, dict):
            raise OperationFailure("Unexpected priority recommendation response")
        priority = TaskPriority.parse(data.get("recommendedPriority"))
        if priority is None:
            raise OperationFailure(f"Unrecognized recommended priority: {data.get('recommendedPriority')!r}")
        return PriorityRecommendation(recommended_priority=priority, title=str(data.get("title") or title))

    async def productivity_insight(self) -> str:
        data = await self._transport.request_json("GET", "/ai/productivity-insight")
        if not isinstance(data, dict) or not isinstance(data.get("insight"), str):
            raise OperationFailure("Unexpected productivity insight response")
        return data["insight"].strip()

    async def suggestions(self) -> TaskSuggestions:
        data = await self._transport.request_json("GET", "/ai/suggestions")
        if not isinstance(data, dict):
            raise OperationFailure("Unexpected suggestions response")
        raw = data.get("suggestions") or []
        items = [s.strip() for s in raw if isinstance(s, str) and s.strip()] if isinstance(raw, list) else []
        insight = data.get("insight")
        return TaskSuggestions(suggestions=items, insight=insight.strip() if isinstance(insight, str) else "")
