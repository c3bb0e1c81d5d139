from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import Dict, List, Optional

from portfolio_site.core.config import settings
from portfolio_site.core.email import send_email
from portfolio_site.core.email_config import email_config
from portfolio_site.core.errors import ContactValidationError
from portfolio_site.schemas.contact import ContactRequest, is_valid_email
from portfolio_site.services import email_templates

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "All fields are required"
INVALID_EMAIL_MESSAGE = "Please provide a valid email address"
SUCCESS_MESSAGE = "Message sent successfully! I'll get back to you soon."
DELIVERY_FAILED_MESSAGE = "Failed to send message. Please try again later."

NOTIFICATION = "notification"
AUTO_REPLY = "auto_reply"


@dataclass
class DeliveryReport:
    """Outcome of each outbound email of one submission."""

    outcomes: Dict[str, Optional[BaseException]] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(exc is None for exc in self.outcomes.values())

    @property
    def failed_stages(self) -> List[str]:
        return [stage for stage, exc in self.outcomes.items() if exc is not None]


def _header_text(value: str) -> str:
    """Fold a visitor value onto one line; headers cannot carry line breaks."""
    return " ".join(part.strip() for part in value.splitlines() if part.strip())


class ContactService:
    """Validate contact submissions and relay them as two emails."""

    def validate(self, request: ContactRequest) -> None:
        missing = request.missing_fields()
        if missing:
            logger.info("Contact submission rejected missing=%s", ",".join(missing))
            raise ContactValidationError(MISSING_FIELDS_MESSAGE)

        if not is_valid_email(request.email):
            logger.info("Contact submission rejected: malformed email")
            raise ContactValidationError(INVALID_EMAIL_MESSAGE)

    def _sender(self) -> str:
        return settings.EMAIL_USER or email_config.DEFAULT_FROM

    def build_notification_email(self, request: ContactRequest) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._sender()
        msg["To"] = settings.owner_address or self._sender()
        msg["Reply-To"] = request.email
        msg["Subject"] = (
            f"{email_config.NOTIFICATION_SUBJECT_PREFIX} {_header_text(request.subject)}"
        )
        msg.set_content(email_templates.render_notification_text(request))
        msg.add_alternative(
            email_templates.render_notification_html(request), subtype="html"
        )
        return msg

    def build_auto_reply_email(self, request: ContactRequest) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self._sender()
        msg["To"] = request.email
        msg["Subject"] = email_config.AUTO_REPLY_SUBJECT
        msg.set_content(email_templates.render_auto_reply_text(request))
        msg.add_alternative(
            email_templates.render_auto_reply_html(request), subtype="html"
        )
        return msg

    async def deliver(self, request: ContactRequest) -> DeliveryReport:
        """Send both emails as independent tasks and join their outcomes."""
        stages = {
            NOTIFICATION: self.build_notification_email(request),
            AUTO_REPLY: self.build_auto_reply_email(request),
        }
        results = await asyncio.gather(
            *(send_email(message) for message in stages.values()),
            return_exceptions=True,
        )

        report = DeliveryReport()
        for stage, result in zip(stages, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            report.outcomes[stage] = result if isinstance(result, BaseException) else None

        for stage in report.failed_stages:
            exc = report.outcomes[stage]
            logger.error(
                "Contact email stage=%s failed: %s: %s",
                stage,
                type(exc).__name__,
                exc,
            )
        return report
