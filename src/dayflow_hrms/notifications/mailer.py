from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, *, to: str, subject: str, html: str) -> bool:
        """Deliver one message; return False instead of raising on failure."""

        raise NotImplementedError


@dataclass(frozen=True)
class MailConfig:
    host: str = "smtp.gmail.com"
    port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    sender: str = "Dayflow HRMS"
    use_tls: bool = True
    timeout: int = 30

    @classmethod
    def from_dict(cls, data: dict) -> "MailConfig":
        return cls(
            host=str(data.get("host") or "smtp.gmail.com"),
            port=int(data.get("port") or 587),
            username=data.get("username") or None,
            password=data.get("password") or None,
            sender=str(data.get("sender") or "Dayflow HRMS"),
            use_tls=bool(data.get("use_tls", True)),
        )


class SmtpMailer(Mailer):
    """Send HTML mail over SMTP with STARTTLS."""

    def __init__(self, config: MailConfig):
        self._config = config

    def send(self, *, to: str, subject: str, html: str) -> bool:
        cfg = self._config
        if not cfg.username or not cfg.password:
            logger.error("Mail credentials missing; message to %s not sent", to)
            return False

        msg = MIMEMultipart()
        msg["From"] = f"{cfg.sender} <{cfg.username}>"
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(html, "html"))

        try:
            with smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout) as server:
                server.ehlo()
                if cfg.use_tls:
                    server.starttls()
                    server.ehlo()
                server.login(cfg.username, cfg.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Email to %s failed: %s", to, e)
            return False

        logger.info("Email sent to %s (%s)", to, subject)
        return True
