"""Input rules for users and diary entries.

Everything here is pure: no database, no clock. Each ``validate_*`` helper
returns a list of human-readable problems (empty when the value is fine);
the ``ensure_*`` helpers raise :class:`ValidationError` instead.
"""
import re
from datetime import date
from typing import List, Optional

from shiori.core.exceptions import ValidationError

USERNAME_RE = re.compile(r"[A-Za-z0-9_]{3,20}")
EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
LETTER_RE = re.compile(r"[A-Za-z]")
DIGIT_RE = re.compile(r"[0-9]")
DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
TIME_RE = re.compile(r"([01][0-9]|2[0-3]):[0-5][0-9]")

MIN_PASSWORD_LENGTH = 6


def validate_username(username: str) -> List[str]:
    if len(username) < 3 or len(username) > 20:
        return ["Username must be between 3 and 20 characters"]
    if not USERNAME_RE.fullmatch(username):
        return ["Username may only contain letters, digits and underscores"]
    return []


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.fullmatch(email))


def validate_password(password: str) -> List[str]:
    if len(password) < MIN_PASSWORD_LENGTH:
        return [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]
    if not LETTER_RE.search(password) or not DIGIT_RE.search(password):
        return ["Password must contain both letters and digits"]
    return []


def validate_registration_data(
    username: Optional[str], email: Optional[str], password: Optional[str]
) -> List[str]:
    """Collect every registration problem at once."""
    if not username or not email or not password:
        return ["All fields are required"]

    errors = validate_username(username)
    if not is_valid_email(email):
        errors.append("Invalid email format")
    errors.extend(validate_password(password))
    return errors


def ensure_valid_registration(
    username: Optional[str], email: Optional[str], password: Optional[str]
) -> None:
    errors = validate_registration_data(username, email, password)
    if errors:
        raise ValidationError("Check the registration data", errors=errors)


def is_valid_date_string(value: str) -> bool:
    """YYYY-MM-DD that is also a real calendar date."""
    if not DATE_RE.fullmatch(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def is_valid_time_string(value: str) -> bool:
    return bool(TIME_RE.fullmatch(value))
