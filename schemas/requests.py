"""Pydantic request body models."""
from typing import Optional

from pydantic import BaseModel, Field


class SettingsPayload(BaseModel):
	"""Request body for PUT /api/settings. Omitted fields keep their stored value."""

	threshold: Optional[int] = Field(None, ge=0, le=100, description="Alert when the smoothed score drops below this value")
	notifications_enabled: Optional[bool] = Field(None, description="Enable posture alerts and exercise reminders")
