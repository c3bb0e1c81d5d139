"""Front-end page and health check."""
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from portfolio_site.core.config import settings
from portfolio_site.core.email_config import email_config
from portfolio_site.schemas.contact import (
    CLIENT_EMAIL_MESSAGE,
    CLIENT_FIELD_RULES,
    EMAIL_PATTERN,
)

router = APIRouter()

templates = Jinja2Templates(directory=str(settings.TEMPLATES_DIR))


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def index(request: Request):
    """Render the portfolio page with the contact form rules inlined."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "profile": email_config,
            "rules": CLIENT_FIELD_RULES,
            "email_pattern": EMAIL_PATTERN,
            "email_message": CLIENT_EMAIL_MESSAGE,
        },
    )


@router.get(
    "/health",
    summary="Health check",
    description="Returns service status and the current server time.",
)
async def health_check():
    """Health check endpoint"""
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }
