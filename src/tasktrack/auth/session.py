# src/tasktrack/auth/session.py

"""
Session manager.

Two states: Anonymous (no live Session) and Authenticated (live Session).

Key invariants:
- the live Session is replaced wholesale (Session is frozen), never edited,
- the credential store is written only from here,
- every subscriber present at a transition is called exactly once, synchronously,
  in subscription order; a new subscriber is called immediately with the current
  value (replay-latest), so nobody ever observes "no value yet".
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.errors import AuthenticationError
from ..core.ports import AuthAPI, SessionStorage
from .models import Session

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session | None], None]


class SessionManager:
    def __init__(self, auth_api: AuthAPI, storage: SessionStorage) -> None:
        self._auth_api = auth_api
        self._storage = storage
        self._session: Session | None = None
        self._listeners: list[SessionListener] = []
        self._initialized = False

    # ---- queries ----

    def is_authenticated(self) -> bool:
        return self._session is not None

    def current_token(self) -> str | None:
        return self._session.token if self._session is not None else None

    def current_session(self) -> Session | None:
        return self._session

    # ---- subscriptions ----

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener and replay the current state to it right away.
        Returns an unsubscribe callable.
        """
        self._listeners.append(listener)
        listener(self._session)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _publish(self) -> None:
        current = self._session
        # Snapshot: listeners added during dispatch already got the value via replay.
        for listener in list(self._listeners):
            try:
                listener(current)
            except Exception:
                logger.exception("Session listener failed: %r", listener)

    # ---- transitions ----

    def initialize(self) -> None:
        """Restore a persisted session (optimistic: the token is not verified here)."""
        if self._initialized:
            logger.debug("SessionManager.initialize() called twice; ignoring.")
            return
        self._initialized = True

        restored = self._storage.load()
        if restored is None:
            logger.info("No persisted session; starting anonymous.")
            return

        self._session = restored
        logger.info("Restored session for user=%s", restored.username)
        self._publish()

    async def login(self, username: str, password: str) -> Session:
        """
        Authenticate and replace the live session.

        On failure the previous state (anonymous or the old session) is kept and
        AuthenticationError is raised with the backend's message.
        """
        try:
            response = await self._auth_api.login(username, password)
        except AuthenticationError:
            logger.info("Login rejected for user=%s", username)
            raise
        except Exception as e:
            logger.exception("Login call failed for user=%s", username)
            raise AuthenticationError() from e

        session = response.to_session()
        if not session.token:
            raise AuthenticationError("Login response did not include a token")

        try:
            self._storage.save(session)
        except OSError:
            # The live session still works; it just won't survive a restart.
            logger.exception("Failed to persist session for user=%s", session.username)
        self._session = session
        logger.info("Logged in as user=%s", session.username)
        self._publish()
        return session

    def logout(self) -> None:
        """Always succeeds; publishes even when already anonymous."""
        try:
            self._storage.clear()
        except Exception:
            logger.exception("Failed to clear persisted session.")
        was = self._session
        self._session = None
        if was is not None:
            logger.info("Logged out user=%s", was.username)
        self._publish()
