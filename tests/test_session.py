# tests/test_session.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasktrack.auth.credential_store import CredentialStore
from tasktrack.auth.models import Session
from tasktrack.auth.session import SessionManager
from tasktrack.core.errors import DEFAULT_LOGIN_ERROR, AuthenticationError

from .fakes import FakeAuthAPI, MemoryStorage


def test_subscribe_replays_current_value_immediately(sessions: SessionManager) -> None:
    seen: list[Session | None] = []
    sessions.subscribe(seen.append)
    assert seen == [None]


def test_initialize_restores_persisted_session_once() -> None:
    saved = Session(username="bob", email="bob@example.com", token="t-1")
    storage = MemoryStorage(saved)
    auth = FakeAuthAPI()
    mgr = SessionManager(auth, storage)

    seen: list[Session | None] = []
    mgr.subscribe(seen.append)
    mgr.initialize()
    mgr.initialize()

    assert mgr.is_authenticated()
    assert mgr.current_token() == "t-1"
    assert seen == [None, saved]
    # restoring never talks to the backend
    assert auth.calls == []


def test_initialize_without_persisted_session_stays_anonymous(sessions: SessionManager) -> None:
    seen: list[Session | None] = []
    sessions.subscribe(seen.append)
    sessions.initialize()

    assert not sessions.is_authenticated()
    assert sessions.current_token() is None
    assert seen == [None]


@pytest.mark.asyncio
async def test_login_persists_and_publishes(sessions: SessionManager, storage: MemoryStorage) -> None:
    seen: list[Session | None] = []
    sessions.subscribe(seen.append)

    session = await sessions.login("alice", "secret")

    assert session.username == "alice"
    assert session.email == "alice@example.com"
    assert sessions.current_session() == session
    assert storage.session == session
    assert seen == [None, session]


@pytest.mark.asyncio
async def test_failed_login_keeps_previous_session(sessions: SessionManager, storage: MemoryStorage) -> None:
    first = await sessions.login("alice", "secret")
    seen: list[Session | None] = []
    sessions.subscribe(seen.append)

    with pytest.raises(AuthenticationError) as exc:
        await sessions.login("alice", "nope")

    assert exc.value.message == "Bad credentials"
    assert sessions.current_session() == first
    assert storage.saves == 1
    assert seen == [first]


@pytest.mark.asyncio
async def test_unexpected_backend_error_becomes_generic_auth_error(
    sessions: SessionManager, auth_api: FakeAuthAPI
) -> None:
    auth_api.error = RuntimeError("socket closed")

    with pytest.raises(AuthenticationError) as exc:
        await sessions.login("alice", "secret")

    assert exc.value.message == DEFAULT_LOGIN_ERROR
    assert not sessions.is_authenticated()


@pytest.mark.asyncio
async def test_second_login_replaces_session(sessions: SessionManager) -> None:
    first = await sessions.login("alice", "secret")
    second = await sessions.login("alice", "secret")

    assert first.token != second.token
    assert sessions.current_token() == second.token


@pytest.mark.asyncio
async def test_logout_clears_storage_and_is_idempotent(sessions: SessionManager, storage: MemoryStorage) -> None:
    await sessions.login("alice", "secret")
    seen: list[Session | None] = []
    sessions.subscribe(seen.append)

    sessions.logout()
    sessions.logout()

    assert not sessions.is_authenticated()
    assert storage.session is None
    assert seen[1:] == [None, None]


@pytest.mark.asyncio
async def test_persist_failure_does_not_block_login(auth_api: FakeAuthAPI) -> None:
    class BrokenStorage(MemoryStorage):
        def save(self, session: Session) -> None:
            raise OSError("read-only filesystem")

    mgr = SessionManager(auth_api, BrokenStorage())

    session = await mgr.login("alice", "secret")

    assert mgr.current_session() == session


def test_failing_listener_does_not_stop_others(sessions: SessionManager) -> None:
    seen: list[Session | None] = []
    boom_calls: list[Session | None] = []

    def boom(_session: Session | None) -> None:
        boom_calls.append(_session)
        if len(boom_calls) > 1:
            raise RuntimeError("listener bug")

    sessions.subscribe(seen.append)
    sessions.subscribe(boom)
    extra: list[Session | None] = []
    sessions.subscribe(extra.append)

    sessions.logout()

    assert seen == [None, None]
    assert extra == [None, None]


def test_unsubscribe_stops_notifications(sessions: SessionManager) -> None:
    seen: list[Session | None] = []
    unsubscribe = sessions.subscribe(seen.append)
    unsubscribe()
    unsubscribe()

    sessions.logout()

    assert seen == [None]


@pytest.mark.asyncio
async def test_subscriber_after_logout_sees_anonymous(sessions: SessionManager) -> None:
    await sessions.login("alice", "secret")
    sessions.logout()

    seen: list[Session | None] = []
    sessions.subscribe(seen.append)

    assert seen == [None]


@pytest.mark.parametrize(
    "blob",
    [
        b"garbage",
        b'{"currentUser": {"username": "\xff\xfe", "token": "t"}}',
        b"[" * 200000 + b"]" * 200000,
    ],
)
def test_initialize_with_corrupt_session_file_stays_anonymous(tmp_path: Path, blob: bytes) -> None:
    path = tmp_path / "session.json"
    path.write_bytes(blob)
    mgr = SessionManager(FakeAuthAPI(), CredentialStore(path))

    seen: list[Session | None] = []
    mgr.subscribe(seen.append)
    mgr.initialize()

    assert not mgr.is_authenticated()
    assert seen == [None]
