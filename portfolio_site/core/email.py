from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage

from portfolio_site.core.config import settings

logger = logging.getLogger(__name__)


class MailTransportNotConfigured(RuntimeError):
    """Raised when the mail account credentials are missing."""


def _send_email_sync(message: EmailMessage) -> None:
    if not settings.EMAIL_USER or not settings.EMAIL_PASS:
        raise MailTransportNotConfigured("EMAIL_USER/EMAIL_PASS are not configured")

    smtp_kwargs = {}
    if settings.SMTP_TIMEOUT is not None:
        smtp_kwargs["timeout"] = settings.SMTP_TIMEOUT

    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, **smtp_kwargs) as server:
        server.starttls()
        server.login(settings.EMAIL_USER, settings.EMAIL_PASS.get_secret_value())
        server.send_message(message)


async def send_email(message: EmailMessage) -> None:
    """Deliver one message through the configured SMTP account.

    Single attempt: failures propagate to the caller unchanged.
    """
    await asyncio.to_thread(_send_email_sync, message)
    logger.info("Email sent subject=%r to=%s", message["Subject"], message["To"])
