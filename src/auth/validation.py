"""Email and form checks for the signup and login pages."""

import re
from typing import Iterable, Pattern

from .errors import AuthError, AuthResult

# Only these top-level domains are accepted at signup.
ALLOWED_TLDS = ("com", "org", "net", "edu", "gov", "mil", "co", "us", "io", "info", "biz")

_pattern_cache = {}


def email_pattern(allowed_tlds: Iterable[str] = ALLOWED_TLDS) -> Pattern:
    """Compile the email pattern for a TLD allow-list."""
    tlds = tuple(allowed_tlds)
    if tlds not in _pattern_cache:
        alternatives = "|".join(re.escape(tld) for tld in tlds)
        _pattern_cache[tlds] = re.compile(
            rf"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.({alternatives})$"
        )
    return _pattern_cache[tlds]


def is_valid_email(email: str, allowed_tlds: Iterable[str] = ALLOWED_TLDS) -> bool:
    """Check an address against the pattern, TLD included.

    Args:
        email: Address as typed, no normalization applied
        allowed_tlds: Accepted top-level domains

    Returns:
        True if the whole string matches
    """
    return bool(email) and email_pattern(allowed_tlds).fullmatch(email) is not None


def validate_signup_form(email: str, password: str, confirm_password: str) -> AuthResult:
    """Check the signup form before it reaches the session manager."""
    if not email or not password or not confirm_password:
        return AuthResult.fail(AuthError.MISSING_FIELDS)

    if password != confirm_password:
        return AuthResult.fail(AuthError.PASSWORD_MISMATCH)

    return AuthResult.ok()


def validate_login_form(
    email: str,
    password: str,
    allowed_tlds: Iterable[str] = ALLOWED_TLDS,
) -> AuthResult:
    """Check the login form before it reaches the session manager."""
    if not email or not password:
        return AuthResult.fail(AuthError.MISSING_FIELDS, "Please enter email and password")

    if not is_valid_email(email, allowed_tlds):
        return AuthResult.fail(AuthError.INVALID_EMAIL_FORMAT)

    return AuthResult.ok()
