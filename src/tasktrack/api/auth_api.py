# src/tasktrack/api/auth_api.py

from __future__ import annotations

import logging

from ..auth.models import LoginResponse
from ..core.errors import AuthenticationError
from .transport import ApiError, ApiTransport

logger = logging.getLogger(__name__)


class AuthApiClient:
    """POST /auth/login -> {token, username, email, message} | 4xx {error}."""

    def __init__(self, transport: ApiTransport) -> None:
        self._transport = transport

    async def login(self, username: str, password: str) -> LoginResponse:
        try:
            data = await self._transport.request_json(
                "POST", "/auth/login", json={"username": username, "password": password}
            )
        except ApiError as e:
            # 4xx carries the backend's reason; anything else gets the generic message.
            if e.status_code is not None and 400 <= e.status_code < 500:
                raise AuthenticationError(e.message) from e
            raise AuthenticationError() from e

        if not isinstance(data, dict):
            raise AuthenticationError("Unexpected login response from server")

        token = data.get("token")
        if not isinstance(token, str) or not token.strip():
            raise AuthenticationError(str(data.get("error") or "") or None)

        return LoginResponse(
            token=token,
            username=str(data.get("username") or username),
            email=str(data.get("email") or ""),
            message=str(data.get("message") or ""),
        )
