from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger

from finance_dashboard.domain.models import User

DASHBOARD_PATH = "/"
AUTH_PATH = "/auth"

class View(Enum):
    DASHBOARD = "dashboard"
    AUTH = "auth"
    NOT_FOUND = "not_found"

@dataclass(frozen=True)
class RouteResult:
    """Which view to render for a path, and where we ended up"""
    view: View
    path: str
    redirected_from: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.view != View.NOT_FOUND

class Router:
    """
    Maps paths to views.

    The dashboard is only shown to signed-in users; everyone else is sent
    to the auth view. Unknown paths render the not-found view.
    """

    def resolve(self, path: str, user: Optional[User]) -> RouteResult:
        path = self._normalize(path)

        if path == DASHBOARD_PATH:
            if user is None:
                return RouteResult(view=View.AUTH, path=AUTH_PATH, redirected_from=path)
            return RouteResult(view=View.DASHBOARD, path=path)

        if path == AUTH_PATH:
            return RouteResult(view=View.AUTH, path=path)

        logger.error("404 Error: User attempted to access non-existent route: {}", path)
        return RouteResult(view=View.NOT_FOUND, path=path)

    @staticmethod
    def _normalize(path: str) -> str:
        path = "/" + path.strip().strip("/")
        return path
