"""
FastAPI dependencies. Use Depends(get_state) in route handlers to receive AppState.
"""
from fastapi import HTTPException, Request

from app_state import AppState
from zen.scheduler import PostureScheduler


def get_state(request: Request) -> AppState:
	"""Return the app state instance attached in lifespan."""
	return request.app.state.state


def get_scheduler(request: Request) -> PostureScheduler:
	sch = get_state(request).scheduler
	if sch is None:
		raise HTTPException(status_code=503, detail="Scheduler not running")
	return sch
