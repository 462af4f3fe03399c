"""Settings API. Routes: /api/settings (alert threshold + notification toggle)."""
from fastapi import APIRouter, Depends, HTTPException

from app_state import AppState
from deps import get_state
from schemas.requests import SettingsPayload
from schemas.responses import SettingsResponse

router = APIRouter(tags=["api_settings"])


def _settings_or_503(state: AppState):
	if state.settings is None:
		raise HTTPException(status_code=503, detail="Settings store not initialised")
	return state.settings


@router.get("/api/settings", response_model=SettingsResponse)
async def get_settings_endpoint(state: AppState = Depends(get_state)):
	"""Current alert threshold and notification toggle."""
	cfg = _settings_or_503(state).threshold_config()
	return SettingsResponse(threshold=cfg.value, notifications_enabled=cfg.notifications_enabled)


@router.put("/api/settings", response_model=SettingsResponse)
async def put_settings_endpoint(payload: SettingsPayload, state: AppState = Depends(get_state)):
	"""Update the threshold and/or notification toggle; takes effect on the next detection tick."""
	store = _settings_or_503(state)
	try:
		cfg = store.update_threshold_config(
			value=payload.threshold,
			notifications_enabled=payload.notifications_enabled,
		)
	except OSError as e:
		raise HTTPException(status_code=500, detail=f"Could not save settings: {e}")
	return SettingsResponse(threshold=cfg.value, notifications_enabled=cfg.notifications_enabled)
