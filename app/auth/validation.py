"""
Credential sanitizing and validation for the login and reset endpoints.

Sanitizing always runs first so every rule sees the canonical form:
email trimmed and lower-cased, password trimmed but otherwise untouched.
Rules are checked in order and the first failure wins; email problems are
reported before password problems.
"""
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, NamedTuple, Optional

from app.auth.errors import ValidationError

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Substring heuristic, not RFC validation: "user@host.c0m" passes the regex but not this.
COMMON_DOMAINS = (".com", ".org", ".net", ".edu", ".gov", ".mil")

COMMON_PASSWORDS = frozenset({"password", "123456", "qwerty", "admin", "123456789"})

MIN_PASSWORD_LENGTH = 6

_SPECIAL_CHARS = re.compile(r"""[!@#$%^&*()_+\-=\[\]{};':"\\|,.<>/?]""")
_DIGITS = re.compile(r"\d")
_LETTERS = re.compile(r"[a-zA-Z]")


class FieldCheck(NamedTuple):
    is_valid: bool
    error: Optional[str] = None


@dataclass
class ValidationResult:
    is_valid: bool
    field: Optional[str]
    error: Optional[str]
    sanitized_data: Dict[str, Any]
    security_checks: Dict[str, bool]
    timestamp: str = field(default_factory=lambda: iso_timestamp())

    def raise_for_error(self) -> None:
        if not self.is_valid:
            raise ValidationError(self.error, field=self.field, timestamp=self.timestamp)


def iso_timestamp(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def validate_email(email: Any) -> FieldCheck:
    if email is None:
        return FieldCheck(False, "Email address is required")

    if not isinstance(email, str) or not email.strip():
        return FieldCheck(False, "Email address cannot be empty")

    if not EMAIL_REGEX.match(email.strip()):
        return FieldCheck(False, "Please enter a valid email address")

    lowered = email.lower()
    if not any(domain in lowered for domain in COMMON_DOMAINS):
        return FieldCheck(False, "Please enter a valid email address with a proper domain")

    return FieldCheck(True)


def validate_password(password: Any) -> FieldCheck:
    if password is None:
        return FieldCheck(False, "Password is required")

    if not isinstance(password, str) or len(password) == 0:
        return FieldCheck(False, "Password cannot be empty")

    if len(password) < MIN_PASSWORD_LENGTH:
        return FieldCheck(False, f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if " " in password:
        return FieldCheck(False, "Password cannot contain spaces")

    return FieldCheck(True)


def sanitize_email(email: Any) -> Any:
    if isinstance(email, str):
        return email.strip().lower()
    return email


def sanitize_login_data(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Canonicalize raw credentials. Absent keys stay absent."""
    sanitized: Dict[str, Any] = {}

    if data.get("email") is not None:
        sanitized["email"] = sanitize_email(data["email"])

    password = data.get("password")
    if password is not None:
        sanitized["password"] = password.strip() if isinstance(password, str) else password

    return sanitized


def validate_login_credentials(credentials: Mapping[str, Any]):
    """Returns ``(is_valid, field, error)`` for already-sanitized credentials."""
    email_check = validate_email(credentials.get("email"))
    if not email_check.is_valid:
        return False, "email", email_check.error

    password_check = validate_password(credentials.get("password"))
    if not password_check.is_valid:
        return False, "password", password_check.error

    return True, None, None


def security_checks(password: Any) -> Dict[str, bool]:
    # Informational only, never fails validation.
    text = password if isinstance(password, str) else ""
    return {
        "hasSpecialChars": bool(_SPECIAL_CHARS.search(text)),
        "hasNumbers": bool(_DIGITS.search(text)),
        "hasLetters": bool(_LETTERS.search(text)),
        "isCommonPassword": bool(text) and text.lower() in COMMON_PASSWORDS,
    }


def comprehensive_login_validation(credentials: Mapping[str, Any]) -> ValidationResult:
    sanitized = sanitize_login_data(credentials)
    is_valid, failed_field, error = validate_login_credentials(sanitized)

    return ValidationResult(
        is_valid=is_valid,
        field=failed_field,
        error=error,
        sanitized_data=sanitized,
        security_checks=security_checks(sanitized.get("password")),
    )
