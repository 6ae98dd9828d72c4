# src/tasktrack/auth/models.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Session:
    """Authenticated identity + bearer token. Replaced wholesale, never mutated."""

    username: str
    email: str
    token: str

    def to_record(self) -> dict[str, str]:
        return {"username": self.username, "email": self.email, "token": self.token}

    @classmethod
    def from_record(cls, data: Any) -> Session:
        """Strict decode of a persisted record. Raises ValueError on any non-conforming shape."""
        if not isinstance(data, dict):
            raise ValueError("session record must be an object")
        token = data.get("token")
        username = data.get("username")
        email = data.get("email", "")
        if not isinstance(token, str) or not token.strip():
            raise ValueError("session record has no token")
        if not isinstance(username, str):
            raise ValueError("session record has no username")
        if email is None:
            email = ""
        if not isinstance(email, str):
            raise ValueError("session record has a non-string email")
        return cls(username=username, email=email, token=token)


@dataclass(frozen=True, slots=True)
class LoginResponse:
    token: str
    username: str
    email: str
    message: str = ""

    def to_session(self) -> Session:
        return Session(username=self.username, email=self.email, token=self.token)
