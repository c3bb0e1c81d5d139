"""Fire-and-forget analytics pings from the front-end."""
import json
import logging

from fastapi import APIRouter, Request
from pydantic import ValidationError

from portfolio_site.schemas.analytics import AnalyticsEvent, AnalyticsResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/analytics",
    response_model=AnalyticsResponse,
    summary="Record an analytics event",
    description="Logs the event and always answers success.",
)
async def track_event(request: Request) -> AnalyticsResponse:
    raw = await request.body()
    try:
        event = AnalyticsEvent.model_validate(json.loads(raw) if raw else {})
    except (ValueError, ValidationError) as exc:
        logger.info("Analytics event ignored: unreadable body (%s)", type(exc).__name__)
        return AnalyticsResponse()

    logger.info("Analytics Event: %s %s", event.event, event.data)
    return AnalyticsResponse()
