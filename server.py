import argparse
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app_state import AppState
from routers import api_settings, api_status, ws
from zen import __version__, db
from zen.alerts import AlertPolicy
from zen.config import AppConfig, get_config, resolve_path
from zen.db import DatabaseSampleSink, LogSampleSink, SampleSink
from zen.notify import BroadcastNotificationSink, FanoutNotificationSink, LogNotificationSink
from zen.pose import build_keypoint_source
from zen.pose.base import KeypointSource, NullKeypointSource
from zen.scheduler import PostureScheduler
from zen.scoring import select_scoring_model
from zen.settings import SettingsStore
from zen.trace import TraceHook

logger = logging.getLogger("zen.server")


def _configure_logging(level: str) -> None:
	logging.basicConfig(
		level=getattr(logging, (level or "INFO").upper(), logging.INFO),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)


def _build_source(cfg: AppConfig) -> KeypointSource:
	try:
		return build_keypoint_source(cfg.pose)
	except RuntimeError as e:
		# Missing optional pose deps or no camera: keep serving, just never detect.
		logger.warning("[Pose] keypoint source unavailable, running without detections: %s", e)
		return NullKeypointSource()


def _build_persistence(cfg: AppConfig) -> SampleSink:
	if db.get_pool() is not None:
		return DatabaseSampleSink(cfg.database.device_id)
	return LogSampleSink()


def build_scheduler(cfg: AppConfig, settings: SettingsStore) -> PostureScheduler:
	"""Wire the pipeline. Model selection completes here, before any tick can run."""
	selection = select_scoring_model(resolve_path(cfg.scoring.model_path))
	return PostureScheduler(
		source=_build_source(cfg),
		selection=selection,
		persistence=_build_persistence(cfg),
		notifier=FanoutNotificationSink([LogNotificationSink(), BroadcastNotificationSink(ws.manager)]),
		settings=settings,
		config=cfg.scheduler,
		alert_policy=AlertPolicy(cooldown_s=cfg.alerts.cooldown_s),
		min_confidence=cfg.features.min_confidence,
		offload_inference=cfg.scoring.offload_inference,
		trace=TraceHook(enabled=cfg.trace.enabled, min_interval_s=cfg.trace.min_interval_s),
	)


@asynccontextmanager
async def lifespan(app: FastAPI):
	cfg = get_config()
	_configure_logging(cfg.logging.level)
	state = AppState(cfg)
	state.manager = ws.manager
	app.state.state = state

	# Initialise database (if configured).
	try:
		await db.init_db()
	except Exception as e:
		# DB is optional; continue with log-only sample persistence.
		logger.warning("[DB] init_db failed: %r", e)

	state.settings = SettingsStore(resolve_path(cfg.settings.path))
	state.scheduler = build_scheduler(cfg, state.settings)
	state.scheduler.start()
	try:
		yield
	finally:
		await state.scheduler.stop()
		await db.close_db()


app = FastAPI(title="Zen posture service", version=__version__, lifespan=lifespan)
app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)
app.include_router(ws.router)
app.include_router(api_settings.router)
app.include_router(api_status.router)


@app.get("/")
async def index():
	return {"service": "zen-posture", "version": __version__}


def main() -> None:
	import uvicorn

	parser = argparse.ArgumentParser(description="Run the posture scoring service.")
	parser.add_argument("--host", default="127.0.0.1")
	parser.add_argument("--port", type=int, default=5001)
	args = parser.parse_args()
	uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
	main()
