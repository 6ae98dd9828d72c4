# src/tasktrack/core/errors.py

"""
Error taxonomy shared by the client.

Primary operations (login, save, delete) raise these to the caller, which
turns them into a user-visible message. Advisory operations (AI status probe,
priority recommendation, insight, suggestions) catch them and only log.

A missing bearer token is deliberately not an error here: the request simply
goes out without an Authorization header and the backend decides.
"""

from __future__ import annotations

DEFAULT_LOGIN_ERROR = "Invalid username or password"


class TaskTrackError(Exception):
    """Base class for all client errors."""


class AuthenticationError(TaskTrackError):
    """Login rejected (bad credentials or auth backend failure)."""

    def __init__(self, message: str | None = None) -> None:
        self.message = (message or "").strip() or DEFAULT_LOGIN_ERROR
        super().__init__(self.message)


class OperationFailure(TaskTrackError):
    """A task CRUD or AI call failed after it was issued."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class CollaboratorUnavailable(TaskTrackError):
    """The AI collaborator is not configured, unreachable or reports itself unavailable."""


class MalformedPersistedState(TaskTrackError):
    """The persisted session record could not be decoded."""
