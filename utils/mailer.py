import asyncio
import logging
import smtplib
from email.mime.text import MIMEText
from typing import Optional

from app.auth.errors import DependencyError
from app.config import Settings


class Mailer:
    """
    Plain-text SMTP sender.

    smtplib is blocking, so delivery runs in the default executor. Any
    transport failure surfaces as ``DependencyError``.
    """

    def __init__(self, settings: Settings, logger: Optional[logging.Logger] = None):
        self.settings = settings
        self.logger = logger or logging.getLogger(__name__)

    async def send(self, to: str, subject: str, body: str) -> None:
        if not self.settings.smtp_configured:
            if self.settings.is_development:
                self.logger.info("[EMAIL] SMTP not configured, message for %s: %s | %s", to, subject, body)
                return
            raise DependencyError("Mail transport is not configured")

        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self.settings.smtp_from or self.settings.smtp_user
        msg["To"] = to

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._send_sync, msg)
        except (smtplib.SMTPException, OSError) as exc:
            self.logger.error("Failed to send email to %s: %s", to, exc)
            raise DependencyError(f"Mail delivery failed: {exc}") from exc

    def _send_sync(self, msg: MIMEText) -> None:
        with smtplib.SMTP(self.settings.smtp_host, self.settings.smtp_port, timeout=15) as server:
            server.starttls()
            server.login(self.settings.smtp_user, self.settings.smtp_password)
            server.send_message(msg)
