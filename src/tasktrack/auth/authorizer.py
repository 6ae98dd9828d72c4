# src/tasktrack/auth/authorizer.py

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..api.transport import ApiRequest, RequestDecorator

AUTHORIZATION = "Authorization"


class TokenSource(Protocol):
    def current_token(self) -> str | None: ...


def authorize(request: ApiRequest, sessions: TokenSource) -> ApiRequest:
    """
    Return `request` with exactly one bearer Authorization header when a session
    exists, else `request` itself. The input is never modified.

    No token is not an error here; the backend rejects unauthorized calls.
    """
    token = sessions.current_token()
    if not token:
        return request

    headers = {k: v for k, v in request.headers.items() if k.lower() != AUTHORIZATION.lower()}
    headers[AUTHORIZATION] = f"Bearer {token}"
    return replace(request, headers=headers)


def bearer_decorator(sessions: TokenSource) -> RequestDecorator:
    """Bind `authorize` to a token source for ApiTransport's decorator pipeline."""

    def _decorate(request: ApiRequest) -> ApiRequest:
        return authorize(request, sessions)

    return _decorate
