# src/tasktrack/api/transport.py

"""
HTTP transport for the task/AI/auth backends.

Pipeline for every call:
    ApiRequest (immutable value) -> request decorators (e.g. bearer token) -> httpx -> decode

Decorators are plain functions ApiRequest -> ApiRequest. They must return a new
value instead of editing the one they were given.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..core.errors import OperationFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ApiRequest:
    method: str
    path: str
    params: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    json: Any = None

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        low = name.lower()
        for k, v in self.headers.items():
            if k.lower() == low:
                return v
        return None


RequestDecorator = Callable[[ApiRequest], ApiRequest]


class ApiError(OperationFailure):
    """Non-2xx response, network failure or undecodable body."""


def make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)


def _error_message(response: httpx.Response) -> str:
    """Prefer the backend's {"error": "..."} body, then {"message": ...}, then the status line."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("error", "message"):
            val = body.get(key)
            if isinstance(val, str) and val.strip():
                return val.strip()
    text = (response.text or "").strip()
    if text and len(text) <= 200 and not text.startswith("<"):
        return text
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


class ApiTransport:
    """
    Thin async wrapper around one lazily created httpx.AsyncClient.

    `client_factory` exists for tests (httpx.MockTransport); production code
    passes base_url/timeout and lets the transport build the client.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: httpx.Timeout | float | None = None,
        decorators: Iterable[RequestDecorator] = (),
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout if timeout is not None else make_timeout(5.0, 30.0)
        self._decorators: list[RequestDecorator] = list(decorators)
        self._client_factory = client_factory
        self._client: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def add_decorator(self, decorator: RequestDecorator) -> None:
        self._decorators.append(decorator)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            if self._client_factory is not None:
                self._client = self._client_factory()
            else:
                self._client = httpx.AsyncClient(
                    base_url=self._base_url,
                    timeout=self._timeout,
                    headers={"Accept": "application/json"},
                )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    def prepare(self, request: ApiRequest) -> ApiRequest:
        for decorate in self._decorators:
            request = decorate(request)
        return request

    async def send(self, request: ApiRequest) -> httpx.Response:
        prepared = self.prepare(request)
        client = self._get_client()
        url = f"{self._base_url}/{prepared.path.lstrip('/')}"

        logger.debug("HTTP %s %s params=%s", prepared.method, prepared.path, dict(prepared.params))
        try:
            response = await client.request(
                prepared.method,
                url,
                params=dict(prepared.params) or None,
                headers=dict(prepared.headers),
                json=prepared.json,
            )
        except httpx.HTTPError as e:
            logger.info("HTTP %s %s failed: %s", prepared.method, prepared.path, e.__class__.__name__)
            raise ApiError(f"Network error: {e.__class__.__name__}") from e

        if response.is_error:
            message = _error_message(response)
            logger.info(
                "HTTP %s %s -> %s (%s)", prepared.method, prepared.path, response.status_code, message
            )
            raise ApiError(message, status_code=response.status_code)

        logger.debug("HTTP %s %s -> %s", prepared.method, prepared.path, response.status_code)
        return response

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Any = None,
    ) -> Any:
        """Send and decode a JSON body. Empty bodies decode to None."""
        response = await self.send(ApiRequest(method=method, path=path, params=dict(params or {}), json=json))
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            # Some endpoints (parse-task) may answer with a bare text body.
            return response.text
