"""Pydantic response models for API docs."""
from typing import Optional

from pydantic import BaseModel


class ScoreResponse(BaseModel):
	"""Response from GET /api/score. Scores are null until the first detection."""

	raw_score: Optional[int] = None
	smoothed_score: Optional[int] = None
	last_updated: Optional[float] = None
	tick: int = 0
	degraded: bool = False


class SettingsResponse(BaseModel):
	"""Response from GET/PUT /api/settings."""

	threshold: int
	notifications_enabled: bool
