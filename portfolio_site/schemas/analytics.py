from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class AnalyticsEvent(BaseModel):
    """Client-side analytics ping; logged and discarded."""

    model_config = ConfigDict(extra="allow")

    event: Optional[str] = None
    data: Any = None


class AnalyticsResponse(BaseModel):
    success: bool = True
