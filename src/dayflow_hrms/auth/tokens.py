from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from ..core.constants import DEFAULT_JWT_EXPIRE_HOURS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import AuthenticatedPrincipal

ALGORITHM = "HS256"


class TokenService:
    """Issue and verify HS256 bearer tokens."""

    def __init__(self, secret: str, *, expire_hours: int = DEFAULT_JWT_EXPIRE_HOURS):
        if not secret:
            raise ValueError("JWT secret is not set")
        self._secret = secret
        self._expire_hours = int(expire_hours)

    def issue(self, *, employee_id: int, role: Role) -> str:
        # exp is checked by PyJWT against the real clock, so it is not injectable
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(employee_id),
            "role": role.value,
            "iat": now,
            "exp": now + timedelta(hours=self._expire_hours),
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> AuthenticatedPrincipal:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

        try:
            return AuthenticatedPrincipal(employee_id=int(payload["sub"]), role=Role(payload["role"]))
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")
