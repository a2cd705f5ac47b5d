from __future__ import annotations

from flask import request

from ..core.exceptions import ValidationError
from .datetime_utils import parse_optional_date
from .validators import optional_int, require_enum


def date_arg(name: str):
    try:
        return parse_optional_date(request.args.get(name))
    except ValueError:
        raise ValidationError(f"{name} must be a YYYY-MM-DD date")


def enum_arg(enum_cls, name: str):
    value = request.args.get(name)
    return require_enum(enum_cls, value, name) if value else None


def int_arg(name: str):
    return optional_int(request.args.get(name), name)


def json_body() -> dict:
    """Request JSON as a dict; a missing body is empty, any other shape is rejected."""
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body
