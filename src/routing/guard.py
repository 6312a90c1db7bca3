"""Navigation guard for the portal pages.

``RouteGuard.decide`` looks only at the requested route and whether someone
is logged in. It never touches the session, so the web layer can call it on
every request before any page handler runs.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlencode

from src.auth.errors import AuthError, AuthResult

logger = logging.getLogger(__name__)

NOT_REGISTERED_MESSAGE = "Email not registered. Please sign up."


class Route(str, Enum):
    """Pages the portal knows about."""
    ROOT = "/"
    LOGIN = "/login"
    SIGNUP = "/signup"
    DASHBOARD = "/dashboard"
    NOT_FOUND = "*"


PUBLIC_ROUTES = frozenset({Route.LOGIN, Route.SIGNUP, Route.NOT_FOUND})
PROTECTED_ROUTES = frozenset({Route.DASHBOARD})
AUTH_FORM_ROUTES = frozenset({Route.LOGIN, Route.SIGNUP})


def resolve_route(path: str) -> Route:
    """Map a request path to a route. Unknown paths are NOT_FOUND."""
    if path in ("", "/"):
        return Route.ROOT
    for route in (Route.LOGIN, Route.SIGNUP, Route.DASHBOARD):
        if path == route.value:
            return route
    return Route.NOT_FOUND


class DecisionKind(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class Decision:
    """Outcome of a navigation check."""
    kind: DecisionKind
    target: Optional[Route] = None
    message: Optional[str] = None
    prefill_email: Optional[str] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(kind=DecisionKind.ALLOW)

    @classmethod
    def redirect(
        cls,
        target: Route,
        message: Optional[str] = None,
        prefill_email: Optional[str] = None,
    ) -> "Decision":
        return cls(
            kind=DecisionKind.REDIRECT,
            target=target,
            message=message,
            prefill_email=prefill_email,
        )

    @property
    def allowed(self) -> bool:
        return self.kind is DecisionKind.ALLOW

    def location(self) -> Optional[str]:
        """URL to redirect to, with message and prefill as query parameters."""
        if self.allowed:
            return None
        params = {}
        if self.message:
            params["message"] = self.message
        if self.prefill_email:
            params["email"] = self.prefill_email
        if params:
            return f"{self.target.value}?{urlencode(params)}"
        return self.target.value


class RouteGuard:
    """Decides whether a navigation is allowed for the current session state.

    Args:
        prefill_on_not_found: Carry the attempted email to the signup page
            after a login with an unregistered address
    """

    def __init__(self, prefill_on_not_found: bool = True):
        self.prefill_on_not_found = prefill_on_not_found

    def decide(self, destination: Route, authenticated: bool) -> Decision:
        """Allow the navigation or name where to go instead.

        Args:
            destination: Requested route
            authenticated: Whether a user is logged in

        Returns:
            Decision for this (destination, authenticated) pair
        """
        if destination is Route.ROOT:
            return Decision.redirect(Route.LOGIN)

        if destination in PROTECTED_ROUTES and not authenticated:
            logger.debug(f"Anonymous request for {destination.value}, redirecting to login")
            return Decision.redirect(Route.LOGIN)

        if destination in AUTH_FORM_ROUTES and authenticated:
            logger.debug(f"Authenticated request for {destination.value}, redirecting to dashboard")
            return Decision.redirect(Route.DASHBOARD)

        return Decision.allow()

    def after_login_failure(self, result: AuthResult, email: str) -> Optional[Decision]:
        """Redirect to signup when the login email is not registered.

        Returns:
            A redirect carrying a message and the email for prefill, or None
            when the error should be shown on the login form
        """
        if result.success or result.error is not AuthError.USER_NOT_FOUND:
            return None
        return Decision.redirect(
            Route.SIGNUP,
            message=NOT_REGISTERED_MESSAGE,
            prefill_email=email if self.prefill_on_not_found else None,
        )
