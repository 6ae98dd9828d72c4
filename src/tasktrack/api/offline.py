# src/tasktrack/api/offline.py

from __future__ import annotations

from ..core.errors import CollaboratorUnavailable
from ..tasks.task_models import AIParseResult, AIStatus, PriorityRecommendation, TaskSuggestions


class OfflineAIClient:
    """
    Stand-in AI collaborator used when AI features are disabled in settings.

    Behavior:
    - status() reports unavailable, so every AI affordance stays hidden
    - any other call raises CollaboratorUnavailable (callers already fail soft)
    """

    async def status(self) -> AIStatus:
        return AIStatus(available=False, provider="offline", model="", cost="")

    async def parse_task(self, text: str) -> AIParseResult:
        raise CollaboratorUnavailable("AI features are disabled (TASKTRACK_AI_ENABLED=false).")

    async def recommend_priority(self, title: str, description: str | None = None) -> PriorityRecommendation:
        raise CollaboratorUnavailable("AI features are disabled (TASKTRACK_AI_ENABLED=false).")

    async def productivity_insight(self) -> str:
        raise CollaboratorUnavailable("AI features are disabled (TASKTRACK_AI_ENABLED=false).")

    async def suggestions(self) -> TaskSuggestions:
        raise CollaboratorUnavailable("AI features are disabled (TASKTRACK_AI_ENABLED=false).")
