"""User authentication module for the student portal."""

from .errors import AuthError, AuthResult
from .session import SessionManager, SessionState
from .user_store import User, UserStore, AcademicStats, Activity

__all__ = [
    "AuthError",
    "AuthResult",
    "SessionManager",
    "SessionState",
    "User",
    "UserStore",
    "AcademicStats",
    "Activity",
]
