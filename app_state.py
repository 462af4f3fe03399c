"""
Explicit app state: single source of truth for runtime lifecycle.
Created in lifespan, attached to app.state.state; injected into routes via Depends(get_state).
"""
from typing import Any, Optional

from zen.config import AppConfig
from zen.scheduler import PostureScheduler
from zen.settings import SettingsStore


class AppState:
	"""
	Holds all runtime state for the app. Populated in server lifespan; routes and
	the scheduler receive this instance instead of reading module globals.
	"""
	cfg: Optional[AppConfig] = None
	settings: Optional[SettingsStore] = None
	scheduler: Optional[PostureScheduler] = None

	# WebSocket manager (routers.ws.manager), used by the broadcast notification sink
	manager: Any = None

	def __init__(self, cfg: Optional[AppConfig] = None) -> None:
		self.cfg = cfg
