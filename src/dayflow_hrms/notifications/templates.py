from __future__ import annotations

from dataclasses import dataclass
from html import escape


@dataclass(frozen=True)
class EmailContent:
    subject: str
    html: str


def _wrap(body: str) -> str:
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">'
        '<h1 style="text-align: center;">Dayflow HRMS</h1>'
        f"{body}</div>"
    )


def otp_verification(name: str, otp: str, ttl_minutes: int) -> EmailContent:
    return EmailContent(
        subject="Verify Your Email - Dayflow HRMS",
        html=_wrap(
            f"<h2>Welcome, {escape(name)}!</h2>"
            "<p>To complete your registration, please use the code below:</p>"
            f'<h3 style="font-size:22px;">{escape(otp)}</h3>'
            f"<p>This code is valid for <b>{ttl_minutes} minutes</b>. "
            "If you did not request this, please ignore this email.</p>"
        ),
    )


def password_reset(name: str, reset_url: str, ttl_minutes: int) -> EmailContent:
    return EmailContent(
        subject="Password Reset - Dayflow HRMS",
        html=_wrap(
            f"<h2>Hello, {escape(name)}</h2>"
            "<p>We received a request to reset your password.</p>"
            f'<p><a href="{escape(reset_url)}">Reset Password</a></p>'
            f"<p>This link will expire in {ttl_minutes} minutes.</p>"
        ),
    )
