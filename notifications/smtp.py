"""
SmtpNotifier — plain-text password-reset mail over SMTP.

``smtplib`` is blocking, so each send runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.mime.text import MIMEText

from config.settings import Settings
from notifications.base import RESET_SUBJECT, BaseNotifier, reset_body

logger = logging.getLogger(__name__)


class SmtpNotifier(BaseNotifier):
    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def _build_message(self, to_email: str, reset_link: str) -> MIMEText:
        mime = MIMEText(reset_body(reset_link), "plain")
        mime["to"] = to_email
        mime["from"] = self._settings.sender_address
        mime["subject"] = RESET_SUBJECT
        return mime

    def _deliver(self, mime: MIMEText) -> None:
        s = self._settings
        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=30) as smtp:
            if s.smtp_use_tls:
                smtp.starttls()
            if s.smtp_username:
                smtp.login(s.smtp_username, s.smtp_password)
            smtp.send_message(mime)

    async def send_password_reset(self, to_email: str, reset_link: str) -> None:
        mime = self._build_message(to_email, reset_link)
        await asyncio.to_thread(self._deliver, mime)
        logger.info("Password reset mail sent to %s", to_email)
