"""Tests for the navigation guard."""

import itertools
import pytest
from pathlib import Path
from urllib.parse import parse_qs, urlsplit

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from src.auth import AuthError, AuthResult, SessionManager, UserStore
from src.routing.guard import (
    Decision,
    DecisionKind,
    NOT_REGISTERED_MESSAGE,
    PUBLIC_ROUTES,
    Route,
    RouteGuard,
    resolve_route,
)
from src.storage import MemoryStorage


@pytest.fixture
def guard():
    return RouteGuard()


class TestResolveRoute:
    """Test path to route mapping."""

    @pytest.mark.parametrize("path,route", [
        ("/", Route.ROOT),
        ("", Route.ROOT),
        ("/login", Route.LOGIN),
        ("/signup", Route.SIGNUP),
        ("/dashboard", Route.DASHBOARD),
        ("/dashboard/settings", Route.NOT_FOUND),
        ("/nowhere", Route.NOT_FOUND),
    ])
    def test_resolve(self, path, route):
        assert resolve_route(path) is route


class TestDecide:
    """Test guard decisions."""

    def test_root_redirects_to_login(self, guard):
        """Test that the root always goes to the login page."""
        assert guard.decide(Route.ROOT, False) == Decision.redirect(Route.LOGIN)
        assert guard.decide(Route.ROOT, True) == Decision.redirect(Route.LOGIN)

    def test_public_routes_allowed_when_anonymous(self, guard):
        """Test that anonymous users can reach public pages."""
        for route in PUBLIC_ROUTES:
            assert guard.decide(route, False).allowed is True

    def test_dashboard_requires_login(self, guard):
        """Test the redirect for anonymous dashboard requests."""
        decision = guard.decide(Route.DASHBOARD, False)

        assert decision.kind is DecisionKind.REDIRECT
        assert decision.target is Route.LOGIN
        assert decision.message is None
        assert decision.location() == "/login"

    def test_dashboard_allowed_when_authenticated(self, guard):
        assert guard.decide(Route.DASHBOARD, True).allowed is True

    @pytest.mark.parametrize("route", [Route.LOGIN, Route.SIGNUP])
    def test_auth_forms_redirect_when_authenticated(self, guard, route):
        """Test that logged-in users skip the auth forms."""
        decision = guard.decide(route, True)

        assert decision == Decision.redirect(Route.DASHBOARD)

    def test_not_found_is_public(self, guard):
        assert guard.decide(Route.NOT_FOUND, True).allowed is True
        assert guard.decide(Route.NOT_FOUND, False).allowed is True

    def test_decisions_are_repeatable(self, guard):
        """Test that the same inputs always give the same decision."""
        for route, authenticated in itertools.product(Route, (True, False)):
            first = guard.decide(route, authenticated)
            for _ in range(3):
                assert guard.decide(route, authenticated) == first

    def test_dashboard_denied_after_logout(self, guard):
        """Test the guard against a session that just logged out."""
        store = UserStore(MemoryStorage())
        store.initialize()
        session = SessionManager(store)
        session.signup("a@test.com", "pw1")
        assert guard.decide(Route.DASHBOARD, session.is_authenticated()).allowed is True

        session.logout()

        assert session.is_authenticated() is False
        assert guard.decide(Route.DASHBOARD, session.is_authenticated()).allowed is False


class TestAfterLoginFailure:
    """Test the redirect to signup for unregistered emails."""

    def test_user_not_found_redirects_with_prefill(self, guard):
        """Test message and prefill for an unknown email."""
        store = UserStore(MemoryStorage())
        store.initialize()
        result = SessionManager(store).login("ghost@test.com", "anything")

        decision = guard.after_login_failure(result, "ghost@test.com")

        assert result.error is AuthError.USER_NOT_FOUND
        assert decision.target is Route.SIGNUP
        assert decision.message == NOT_REGISTERED_MESSAGE
        assert decision.prefill_email == "ghost@test.com"

        location = urlsplit(decision.location())
        assert location.path == "/signup"
        assert parse_qs(location.query) == {
            "message": [NOT_REGISTERED_MESSAGE],
            "email": ["ghost@test.com"],
        }

    def test_invalid_password_stays_inline(self, guard):
        result = AuthResult.fail(AuthError.INVALID_PASSWORD)

        assert guard.after_login_failure(result, "a@test.com") is None

    def test_success_has_no_redirect(self, guard):
        assert guard.after_login_failure(AuthResult.ok(), "a@test.com") is None

    def test_prefill_can_be_disabled(self):
        """Test a guard that does not carry the email."""
        guard = RouteGuard(prefill_on_not_found=False)

        decision = guard.after_login_failure(
            AuthResult.fail(AuthError.USER_NOT_FOUND), "ghost@test.com"
        )

        assert decision.prefill_email is None
        assert decision.location() == "/signup?" + "message=Email+not+registered.+Please+sign+up."


class TestDecision:
    """Test Decision helpers."""

    def test_allow_has_no_location(self):
        assert Decision.allow().location() is None

    def test_decision_is_immutable(self):
        decision = Decision.allow()

        with pytest.raises(Exception):
            decision.kind = DecisionKind.REDIRECT
