"""Score and status API. Routes: /api/score, /api/status."""
from fastapi import APIRouter, Depends

from deps import get_scheduler
from routers.ws import manager
from schemas.responses import ScoreResponse
from zen import db
from zen.scheduler import PostureScheduler

router = APIRouter(tags=["api_status"])


@router.get("/api/score", response_model=ScoreResponse)
async def get_score_endpoint(scheduler: PostureScheduler = Depends(get_scheduler)):
	"""Latest committed posture score (what the display shows)."""
	snap = scheduler.snapshot()
	return ScoreResponse(
		raw_score=snap.raw_score,
		smoothed_score=snap.smoothed_score,
		last_updated=snap.last_updated,
		tick=snap.tick,
		degraded=scheduler.degraded,
	)


@router.get("/api/status")
async def get_status_endpoint(scheduler: PostureScheduler = Depends(get_scheduler)):
	"""Scheduler counters, model selection, database and websocket status."""
	return {
		"scheduler": scheduler.status(),
		"db": db.get_status(),
		"ws_clients": manager.client_count,
	}
