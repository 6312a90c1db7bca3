"""Auth outcomes shared by the session layer and the views."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .user_store import User


class AuthError(str, Enum):
    """User-facing auth failures. None of them are fatal."""
    EMAIL_ALREADY_EXISTS = "email_already_exists"
    INVALID_EMAIL_FORMAT = "invalid_email_format"
    PASSWORD_MISMATCH = "password_mismatch"
    MISSING_FIELDS = "missing_fields"
    USER_NOT_FOUND = "user_not_found"
    INVALID_PASSWORD = "invalid_password"

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self]


ERROR_MESSAGES = {
    AuthError.EMAIL_ALREADY_EXISTS: "Email already exists",
    AuthError.INVALID_EMAIL_FORMAT: "Please enter a valid email address",
    AuthError.PASSWORD_MISMATCH: "Passwords do not match",
    AuthError.MISSING_FIELDS: "All fields are required",
    AuthError.USER_NOT_FOUND: "User not found",
    AuthError.INVALID_PASSWORD: "Invalid password",
}


@dataclass
class AuthResult:
    """Outcome of a signup, login or form check."""
    success: bool
    user: Optional["User"] = None
    error: Optional[AuthError] = None
    message: Optional[str] = None

    @classmethod
    def ok(cls, user: Optional["User"] = None) -> "AuthResult":
        return cls(success=True, user=user)

    @classmethod
    def fail(cls, error: AuthError, message: Optional[str] = None) -> "AuthResult":
        return cls(success=False, error=error, message=message or error.message)
