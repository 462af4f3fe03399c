"""Pydantic request/response models for API validation and docs."""
from schemas.requests import SettingsPayload
from schemas.responses import ScoreResponse, SettingsResponse

__all__ = [
	"SettingsPayload",
	"ScoreResponse",
	"SettingsResponse",
]
