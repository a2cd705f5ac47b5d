from __future__ import annotations

import re

from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date

_EMAIL_RE = re.compile(r"^[\w.+-]+@[\w-]+(\.[\w-]+)*\.\w{2,}$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if not isinstance(value, str) or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str) -> str:
    email = require_non_empty(value, "Email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Please provide a valid email")
    return email


def require_strong_password(value: str) -> str:
    require_min_length(value, "Password", MIN_PASSWORD_LENGTH)
    if not re.search(r"[a-z]", value):
        raise ValidationError("Password must contain a lowercase letter")
    if not re.search(r"[A-Z]", value):
        raise ValidationError("Password must contain an uppercase letter")
    if not re.search(r"[0-9]", value):
        raise ValidationError("Password must contain a number")
    return value


def require_enum(enum_cls, value, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


def optional_int(value, field_name: str):
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def optional_date(value, field_name: str):
    """YYYY-MM-DD string to date; empty means None."""
    if value is None or value == "":
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD date")
