from __future__ import annotations

import hashlib
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_email, require_non_empty, require_strong_password
from ..core.constants import (
    DEFAULT_PAID_LEAVE_DAYS,
    DEFAULT_SICK_LEAVE_DAYS,
    DEFAULT_UNPAID_LEAVE_DAYS,
    OTP_TTL_MINUTES,
    RESET_TOKEN_TTL_MINUTES,
)
from ..core.enums import LeaveType, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..notifications import templates
from ..notifications.mailer import Mailer
from .model import AuthenticatedPrincipal
from .tokens import TokenService

logger = logging.getLogger(__name__)


def default_balance() -> dict[LeaveType, int]:
    return {
        LeaveType.PAID: DEFAULT_PAID_LEAVE_DAYS,
        LeaveType.SICK: DEFAULT_SICK_LEAVE_DAYS,
        LeaveType.UNPAID: DEFAULT_UNPAID_LEAVE_DAYS,
    }


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def generate_otp() -> str:
    return str(secrets.randbelow(900000) + 100000)


@dataclass(frozen=True)
class AuthResult:
    token: str
    account: Employee


class AuthService:
    """Use cases: registration with emailed OTP, login, password reset."""

    def __init__(
        self,
        employees: EmployeeRepository,
        tokens: TokenService,
        mailer: Mailer,
        *,
        frontend_url: str = "http://localhost:3000",
        clock: Callable[[], datetime] = now_local,
        otp_factory: Callable[[], str] = generate_otp,
    ):
        self._employees = employees
        self._tokens = tokens
        self._mailer = mailer
        self._frontend_url = frontend_url.rstrip("/")
        self._clock = clock
        self._otp_factory = otp_factory

    def _issue(self, account: Employee) -> str:
        return self._tokens.issue(employee_id=account.employee_id, role=account.role)

    def _send_otp(self, name: str, email: str, otp: str) -> None:
        content = templates.otp_verification(name, otp, OTP_TTL_MINUTES)
        self._mailer.send(to=email, subject=content.subject, html=content.html)

    def register(self, *, name: str, email: str, password: str) -> int:
        """Self-service sign-up; accounts always start as employees."""
        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_strong_password(password)

        otp = self._otp_factory()
        otp_expires_at = self._clock() + timedelta(minutes=OTP_TTL_MINUTES)

        existing = self._employees.get_by_email(email)
        if existing:
            if existing.is_verified:
                raise ConflictError("Email already registered")

            self._employees.update_fields(
                existing.employee_id,
                {
                    "full_name": name,
                    "password_hash": generate_password_hash(password),
                    "otp_code": otp,
                    "otp_expires_at": otp_expires_at,
                },
            )
            self._send_otp(name, email, otp)
            logger.info("OTP re-issued for unverified account %s", existing.employee_id)
            return existing.employee_id

        employee_id = self._employees.create(
            fields={
                "full_name": name,
                "email": email,
                "password_hash": generate_password_hash(password),
                "role": Role.EMPLOYEE,
                "is_verified": False,
                "otp_code": otp,
                "otp_expires_at": otp_expires_at,
            },
            balance=default_balance(),
        )
        self._send_otp(name, email, otp)
        logger.info("Account %s registered", employee_id)
        return employee_id

    def verify_otp(self, *, email: str, otp: str) -> str:
        email = require_non_empty(email, "Email").lower()
        otp = require_non_empty(otp, "OTP")

        account = self._employees.get_by_email(email)
        if not account:
            raise NotFoundError("Account not found")
        if account.is_verified:
            return self._issue(account)

        expired = account.otp_expires_at is None or account.otp_expires_at < self._clock()
        if account.otp_code != otp or expired:
            raise ValidationError("Invalid or expired OTP")

        self._employees.update_fields(
            account.employee_id,
            {"is_verified": True, "otp_code": None, "otp_expires_at": None},
        )
        logger.info("Account %s verified", account.employee_id)
        return self._issue(account)

    def login(self, *, email: str, password: str) -> AuthResult:
        if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
            raise ValidationError("Email and password are required")

        account = self._employees.get_by_email(email.strip().lower())
        if not account:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(account.password_hash, password)
        except ValueError:
            # placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError("Invalid credentials")

        if not account.is_verified:
            raise AuthorizationError("Email not verified. Please verify with OTP.")

        return AuthResult(token=self._issue(account), account=account)

    def forgot_password(self, *, email: str) -> None:
        email = require_non_empty(email, "Email").lower()
        account = self._employees.get_by_email(email)
        if not account:
            raise NotFoundError("No user found with that email")

        token = secrets.token_hex(32)
        self._employees.update_fields(
            account.employee_id,
            {
                "reset_token_hash": hash_token(token),
                "reset_expires_at": self._clock() + timedelta(minutes=RESET_TOKEN_TTL_MINUTES),
            },
        )

        content = templates.password_reset(
            account.full_name,
            f"{self._frontend_url}/reset-password/{token}",
            RESET_TOKEN_TTL_MINUTES,
        )
        self._mailer.send(to=account.email, subject=content.subject, html=content.html)
        logger.info("Password reset requested for account %s", account.employee_id)

    def reset_password(self, *, token: str, new_password: str) -> str:
        require_strong_password(new_password)

        account = self._employees.get_by_reset_token_hash(hash_token(token or ""))
        if not account or not account.reset_expires_at or account.reset_expires_at < self._clock():
            raise ValidationError("Invalid or expired reset token")

        self._employees.update_fields(
            account.employee_id,
            {
                "password_hash": generate_password_hash(new_password),
                "reset_token_hash": None,
                "reset_expires_at": None,
            },
        )
        logger.info("Password reset for account %s", account.employee_id)
        return self._issue(account)

    def me(self, principal: AuthenticatedPrincipal) -> Employee:
        account = self._employees.get_by_id(principal.employee_id)
        if not account:
            raise NotFoundError("Account not found")
        return account

    def resolve(self, token: str) -> AuthenticatedPrincipal:
        """Verify a bearer token and confirm its account still exists."""

        principal = self._tokens.decode(token)
        account: Optional[Employee] = self._employees.get_by_id(principal.employee_id)
        if not account:
            raise AuthenticationError("User not found")
        return AuthenticatedPrincipal(employee_id=account.employee_id, role=account.role)
