"""Single-user session over the user store.

The portal has one "current user" slot per running app. ``SessionManager``
is created by the app factory and handed to whatever needs it; there is no
module-level instance.
"""

import logging
from enum import Enum
from typing import Iterable, Optional

from .errors import AuthError, AuthResult
from .user_store import User, UserStore
from .validation import ALLOWED_TLDS, is_valid_email

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class SessionManager:
    """Handles signup, login and logout against a ``UserStore``.

    Failed operations never change the session. The current user is a copy,
    so later changes to the store do not reach an active session.

    Args:
        user_store: Initialized user store
        allowed_tlds: Top-level domains accepted at signup
    """

    def __init__(self, user_store: UserStore, allowed_tlds: Iterable[str] = ALLOWED_TLDS):
        self.user_store = user_store
        self.allowed_tlds = tuple(allowed_tlds)
        self.current_user: Optional[User] = None

    @property
    def state(self) -> SessionState:
        if self.current_user is None:
            return SessionState.ANONYMOUS
        return SessionState.AUTHENTICATED

    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def signup(self, email: str, password: str) -> AuthResult:
        """Register a new user and log them in.

        Args:
            email: User's email address
            password: Plain text password

        Returns:
            AuthResult with the new user, or EMAIL_ALREADY_EXISTS /
            INVALID_EMAIL_FORMAT
        """
        if self.user_store.find_user(email) is not None:
            logger.debug(f"Signup rejected, email taken: {email}")
            return AuthResult.fail(AuthError.EMAIL_ALREADY_EXISTS)

        if not is_valid_email(email, self.allowed_tlds):
            logger.debug(f"Signup rejected, invalid email: {email}")
            return AuthResult.fail(AuthError.INVALID_EMAIL_FORMAT)

        user = self.user_store.add_user(email, password)
        self.current_user = user
        logger.info(f"Signed up and logged in {email}")
        return AuthResult.ok(user)

    def login(self, email: str, password: str) -> AuthResult:
        """Authenticate an existing user.

        The email format is not checked here, only whether it is registered.

        Returns:
            AuthResult with the user, or USER_NOT_FOUND / INVALID_PASSWORD
        """
        user = self.user_store.find_user(email)

        if user is None:
            logger.debug(f"Login rejected, unknown email: {email}")
            return AuthResult.fail(AuthError.USER_NOT_FOUND)

        if user.password != password:
            logger.debug(f"Login rejected, wrong password for {email}")
            return AuthResult.fail(AuthError.INVALID_PASSWORD)

        self.current_user = user
        logger.info(f"Logged in {email}")
        return AuthResult.ok(user)

    def logout(self) -> None:
        """Clear the current user."""
        if self.current_user is not None:
            logger.info(f"Logged out {self.current_user.email}")
        self.current_user = None
