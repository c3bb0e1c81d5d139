from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

# Same pattern on both sides of the wire; use with fullmatch().
EMAIL_PATTERN = r"[^\s@]+@[^\s@]+\.[^\s@]+"
EMAIL_RE = re.compile(EMAIL_PATTERN)

CONTACT_FIELDS = ("name", "email", "subject", "message")


def is_valid_email(value: str) -> bool:
    return EMAIL_RE.fullmatch(value) is not None


@dataclass(frozen=True)
class FieldRule:
    """Minimum trimmed length enforced by the browser form."""

    min_length: int
    message: str


# Browser-side rules, rendered into the form as data attributes.
CLIENT_FIELD_RULES: Dict[str, FieldRule] = {
    "name": FieldRule(2, "Name must be at least 2 characters long"),
    "subject": FieldRule(5, "Subject must be at least 5 characters long"),
    "message": FieldRule(10, "Message must be at least 10 characters long"),
}
CLIENT_EMAIL_MESSAGE = "Please enter a valid email address"


def collect_client_errors(data: Mapping[str, Optional[str]]) -> List[str]:
    """Apply the form rules and return messages in field order."""
    errors = []
    for field in CONTACT_FIELDS:
        value = (data.get(field) or "").strip()
        if field == "email":
            if not value or not is_valid_email(data.get(field) or ""):
                errors.append(CLIENT_EMAIL_MESSAGE)
            continue
        rule = CLIENT_FIELD_RULES[field]
        if len(value) < rule.min_length:
            errors.append(rule.message)
    return errors


class ContactRequest(BaseModel):
    """A contact submission as received by the relay.

    Fields are optional so that a missing field surfaces as a relay
    validation error rather than a schema error.
    """

    name: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    received_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), exclude=True
    )

    def missing_fields(self) -> List[str]:
        return [f for f in CONTACT_FIELDS if not (getattr(self, f) or "").strip()]


class ContactResponse(BaseModel):
    success: bool = True
    message: str
