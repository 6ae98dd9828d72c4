# src/tasktrack/auth/guard.py

from __future__ import annotations

import logging
from typing import Protocol

from ..core.ports import Navigator

logger = logging.getLogger(__name__)

LOGIN_ROUTE = "login"


class AuthQuery(Protocol):
    def is_authenticated(self) -> bool: ...


class RouteGuard:
    """
    Gate for protected views. Holds no state of its own: every call looks at the
    session manager as it is right now.
    """

    def __init__(self, sessions: AuthQuery, navigator: Navigator, *, login_route: str = LOGIN_ROUTE) -> None:
        self._sessions = sessions
        self._navigator = navigator
        self._login_route = login_route

    def can_activate(self, route: str) -> bool:
        if self._sessions.is_authenticated():
            return True
        logger.info("Navigation to %r denied (not authenticated); redirecting to %r", route, self._login_route)
        self._navigator.redirect(self._login_route)
        return False
