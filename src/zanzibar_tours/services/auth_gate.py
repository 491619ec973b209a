"""Route-level authorization decisions."""

from collections.abc import Collection
from dataclasses import dataclass
from enum import StrEnum

from zanzibar_tours.domain.models import Role
from zanzibar_tours.domain.sessions import Session

LOGIN_PATH = "/login"
HOME_PATH = "/"


class AccessOutcome(StrEnum):
    """What the router should do with a navigation."""

    ALLOW = "allow"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_HOME = "redirect_home"


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an access check with its redirect target."""

    outcome: AccessOutcome
    redirect_to: str | None = None
    remembered_path: str | None = None

    @property
    def allowed(self) -> bool:
        """Return True when the protected content may render."""
        return self.outcome is AccessOutcome.ALLOW


@dataclass(frozen=True)
class ProtectedRoute:
    """A route restricted to a set of roles."""

    path: str
    allowed_roles: frozenset[Role]


PROTECTED_ROUTES = (
    ProtectedRoute("/tourist/dashboard", frozenset({Role.TOURIST})),
    ProtectedRoute("/operator/dashboard", frozenset({Role.OPERATOR})),
    ProtectedRoute("/admin/dashboard", frozenset({Role.ADMIN})),
    ProtectedRoute("/admin/dashboard/users", frozenset({Role.ADMIN})),
)

_DASHBOARDS = {
    Role.TOURIST: "/tourist/dashboard",
    Role.OPERATOR: "/operator/dashboard",
    Role.ADMIN: "/admin/dashboard",
}


def check_access(
    session: Session,
    allowed_roles: Collection[Role],
    attempted_path: str | None = None,
) -> AccessDecision:
    """Decide whether a session may open a route limited to allowed_roles.

    The role is trusted from the local session and never re-verified here;
    the server still rejects unauthorized calls on its side.
    """
    if not session.is_authenticated:
        return AccessDecision(
            outcome=AccessOutcome.REDIRECT_LOGIN,
            redirect_to=LOGIN_PATH,
            remembered_path=attempted_path,
        )
    if session.role is None or session.role not in allowed_roles:
        return AccessDecision(outcome=AccessOutcome.REDIRECT_HOME, redirect_to=HOME_PATH)
    return AccessDecision(outcome=AccessOutcome.ALLOW)


def find_route(path: str) -> ProtectedRoute | None:
    """Return the protected route registered for a path, if any."""
    for route in PROTECTED_ROUTES:
        if route.path == path.rstrip("/"):
            return route
    return None


def dashboard_path(role: Role) -> str:
    """Return the landing page for a role after login."""
    return _DASHBOARDS[role]
