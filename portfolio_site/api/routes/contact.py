"""
Contact relay.

Public endpoint receiving the portfolio contact form and forwarding it as an
owner notification plus an auto-reply to the submitter.
"""
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError

from portfolio_site.core.errors import ContactValidationError, DeliveryError
from portfolio_site.core.rate_limiter import check_contact_rate_limit
from portfolio_site.schemas.contact import (
    CONTACT_FIELDS,
    ContactRequest,
    ContactResponse,
)
from portfolio_site.services.contact_service import (
    DELIVERY_FAILED_MESSAGE,
    MISSING_FIELDS_MESSAGE,
    SUCCESS_MESSAGE,
    ContactService,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_contact_service() -> ContactService:
    """Return contact service instance used by the relay endpoint."""
    return ContactService()


async def read_contact_payload(request: Request) -> ContactRequest:
    """Parse a JSON or form-encoded body into a ContactRequest."""
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith(
            ("application/x-www-form-urlencoded", "multipart/form-data")
        ):
            form = await request.form()
            data = {key: value for key, value in form.items() if isinstance(value, str)}
        else:
            raw = await request.body()
            data = json.loads(raw) if raw else {}
    except (ValueError, UnicodeDecodeError) as exc:
        logger.info("Contact body could not be parsed: %s", exc)
        raise ContactValidationError(MISSING_FIELDS_MESSAGE) from exc

    if not isinstance(data, dict):
        raise ContactValidationError(MISSING_FIELDS_MESSAGE)

    fields = {key: data[key] for key in CONTACT_FIELDS if key in data}
    try:
        return ContactRequest.model_validate(fields)
    except ValidationError as exc:
        logger.info("Contact body has non-string fields: %s", exc.error_count())
        raise ContactValidationError(MISSING_FIELDS_MESSAGE) from exc


@router.post(
    "/contact",
    response_model=ContactResponse,
    status_code=status.HTTP_200_OK,
    summary="Send a contact message",
    description="Validates the submission and relays it as two emails.",
    dependencies=[Depends(check_contact_rate_limit)],
)
async def submit_contact(
    request: Request,
    service: ContactService = Depends(get_contact_service),
) -> ContactResponse:
    """Relay a contact form submission by email."""
    contact = await read_contact_payload(request)
    service.validate(contact)

    email_domain = contact.email.split("@")[-1]
    report = await service.deliver(contact)

    if not report.ok:
        logger.error(
            "Contact delivery failed request_id=%s failed_stages=%s",
            getattr(request.state, "request_id", None),
            ",".join(report.failed_stages),
            extra={
                "action": "contact_delivery_failed",
                "email_domain": email_domain,
                "failed_stages": report.failed_stages,
            },
        )
        raise DeliveryError(DELIVERY_FAILED_MESSAGE)

    logger.info(
        "Contact request relayed request_id=%s",
        getattr(request.state, "request_id", None),
        extra={"action": "contact_request_relayed", "email_domain": email_domain},
    )

    return ContactResponse(success=True, message=SUCCESS_MESSAGE)
