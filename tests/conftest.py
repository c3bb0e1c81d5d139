from typing import List

import pytest
from fastapi.testclient import TestClient
from pydantic import SecretStr

from portfolio_site.core.config import settings
from portfolio_site.core.rate_limiter import reset_rate_limiter_state
from portfolio_site.main import app

VALID_SUBMISSION = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "subject": "Hello there",
    "message": "This is a test message.",
}


# -----------------------------------------------------------------------------
# Settings / state isolation
# -----------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_limiter():
    """Every test starts with an empty contact rate-limit window."""
    reset_rate_limiter_state()
    yield
    reset_rate_limiter_state()


@pytest.fixture()
def mail_settings(monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_USER", "owner@example.com", raising=False)
    monkeypatch.setattr(settings, "EMAIL_PASS", SecretStr("app-password"), raising=False)
    monkeypatch.setattr(settings, "OWNER_EMAIL", None, raising=False)
    monkeypatch.setattr(settings, "SMTP_HOST", "smtp.test", raising=False)
    monkeypatch.setattr(settings, "SMTP_PORT", 587, raising=False)
    return settings


@pytest.fixture()
def sent_emails(monkeypatch, mail_settings) -> List:
    """Replace the mail transport with a recorder."""
    sent = []

    async def _record(message):
        sent.append(message)

    monkeypatch.setattr("portfolio_site.services.contact_service.send_email", _record)
    return sent


# -----------------------------------------------------------------------------
# Client Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(scope="function")
def client():
    """
    TestClient bound to the application.
    Using 'with' context manager to trigger lifespan events (startup/shutdown).
    """
    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture()
def valid_submission() -> dict:
    return dict(VALID_SUBMISSION)
