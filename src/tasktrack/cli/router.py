# src/tasktrack/cli/router.py

"""
Console view routing.

Route table:
- ""         -> redirect to login
- login      -> public
- tasks      -> protected
- analytics  -> protected
- anything else -> redirect to login

Protected routes go through RouteGuard on every navigation. The router also
listens to the session manager so that a logout drops the user back to login.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..auth.guard import LOGIN_ROUTE, RouteGuard
from ..auth.models import Session
from ..auth.session import SessionManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Route:
    name: str
    protected: bool


ROUTES: dict[str, Route] = {
    "login": Route("login", protected=False),
    "tasks": Route("tasks", protected=True),
    "analytics": Route("analytics", protected=True),
}


class Router:
    def __init__(self, sessions: SessionManager) -> None:
        self.current = LOGIN_ROUTE
        self.guard = RouteGuard(sessions, self)
        self._unsubscribe = sessions.subscribe(self._on_session)

    def redirect(self, route: str) -> None:
        if route != self.current:
            logger.debug("Redirect %s -> %s", self.current, route)
        self.current = route

    def navigate(self, path: str) -> str:
        """Try to enter `path`; returns the route actually shown afterwards."""
        name = (path or "").strip().strip("/").lower()
        route = ROUTES.get(name)
        if route is None:
            self.redirect(LOGIN_ROUTE)
            return self.current

        if route.protected and not self.guard.can_activate(route.name):
            return self.current

        self.current = route.name
        return self.current

    def _on_session(self, session: Session | None) -> None:
        if session is None and ROUTES[self.current].protected:
            self.redirect(LOGIN_ROUTE)

    def close(self) -> None:
        self._unsubscribe()
