from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Callable

from flask import g, request

from ..common.responses import fail
from ..core.exceptions import AuthenticationError
from .model import AuthenticatedPrincipal
from .service import AuthService


@dataclass(frozen=True)
class Guards:
    login_required: Callable
    admin_required: Callable


def current_principal() -> AuthenticatedPrincipal:
    return g.principal


def build_guards(auth_service: AuthService) -> Guards:
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            header = request.headers.get("Authorization", "")
            if not header.startswith("Bearer "):
                return fail("Not authorized, token missing", 401)

            try:
                g.principal = auth_service.resolve(header.split(" ", 1)[1].strip())
            except AuthenticationError as e:
                return fail(str(e), 401)
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        @login_required
        def wrapper(*args, **kwargs):
            if not current_principal().is_admin:
                return fail("Admin access required", 403)
            return view(*args, **kwargs)

        return wrapper

    return Guards(login_required=login_required, admin_required=admin_required)
