"""
Periodic orchestration of the posture pipeline.

Three independent tasks share one event loop:

  - detection (~100ms): keypoints -> features -> model -> smoothing -> score state -> alert
  - sampling  (~5s):    latest smoothed score -> persistence sink
  - reminder  (~60s):   exercise reminder notification (if notifications are enabled)

The scheduler owns the only mutable shared state (ScoreBoard, AlertState). A failure
inside one task's tick is logged and never stops the other tasks.
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional

from zen.alerts import REMINDER_BODY, REMINDER_TITLE, AlertPolicy, AlertState
from zen.config import SchedulerConfig
from zen.db.samples import SampleSink
from zen.errors import InvalidFrame, MissingKeypoint, PredictionFailed
from zen.notify import NotificationSink
from zen.pose.base import KeypointSource
from zen.pose.features import DEFAULT_MIN_CONFIDENCE, FeatureVector, extract_features
from zen.scoring.loader import ModelSelection
from zen.settings import SettingsStore, ThresholdConfig
from zen.smoothing import smooth_score, to_raw_score
from zen.state import ScoreBoard, ScoreState
from zen.trace import TraceHook

logger = logging.getLogger(__name__)

COUNTER_NAMES = (
	"ticks",
	"detections",
	"no_detection",
	"missing_keypoints",
	"invalid_frames",
	"prediction_failures",
	"source_errors",
	"alerts_fired",
	"notify_failures",
	"samples_recorded",
	"sample_failures",
	"reminders_sent",
	"tick_errors",
)


class PostureScheduler:
	def __init__(
		self,
		source: KeypointSource,
		selection: ModelSelection,
		persistence: SampleSink,
		notifier: NotificationSink,
		settings: SettingsStore,
		config: Optional[SchedulerConfig] = None,
		alert_policy: Optional[AlertPolicy] = None,
		min_confidence: float = DEFAULT_MIN_CONFIDENCE,
		offload_inference: bool = False,
		trace: Optional[TraceHook] = None,
		clock: Callable[[], float] = time.time,
	) -> None:
		self._source = source
		self._selection = selection
		self._model = selection.model
		self._persistence = persistence
		self._notifier = notifier
		self._settings = settings
		self.config = config or SchedulerConfig()
		self._policy = alert_policy or AlertPolicy()
		self._min_confidence = float(min_confidence)
		self._offload = bool(offload_inference)
		self._trace = trace or TraceHook(enabled=False)
		self._clock = clock

		self._board = ScoreBoard()
		self._alert_state = AlertState()
		self._tasks: List[asyncio.Task] = []
		self._stop_event: Optional[asyncio.Event] = None
		self._inflight: Optional[asyncio.Future] = None
		self._disposed = False
		self.counters: Dict[str, int] = {k: 0 for k in COUNTER_NAMES}

	# ------------------------------------------------------------------ readers

	@property
	def degraded(self) -> bool:
		return self._selection.degraded

	@property
	def running(self) -> bool:
		return bool(self._tasks)

	def snapshot(self) -> ScoreState:
		return self._board.snapshot()

	def alert_state(self) -> AlertState:
		return self._alert_state

	def threshold_config(self) -> ThresholdConfig:
		return self._settings.threshold_config()

	def status(self) -> Dict[str, Any]:
		th = self.threshold_config()
		return {
			"running": self.running,
			"score": self.snapshot().as_dict(),
			"last_alert_t": self._alert_state.last_alert_t,
			"model": self._model.name(),
			"trained_model": self._model.is_trained,
			"degraded": self.degraded,
			"degraded_reason": self._selection.reason,
			"source": self._source.name(),
			"threshold": {"value": th.value, "notifications_enabled": th.notifications_enabled},
			"dropped_writes": self._board.dropped_writes,
			"counters": dict(self.counters),
		}

	def _bump(self, key: str) -> None:
		self.counters[key] = self.counters.get(key, 0) + 1

	# ------------------------------------------------------------------ ticks

	async def _predict(self, features: FeatureVector) -> float:
		if not self._offload:
			return self._model.predict(features)
		# Shielded so a cancelled tick leaves the worker call to finish; stop() waits for it.
		fut = asyncio.ensure_future(asyncio.to_thread(self._model.predict, features))
		self._inflight = fut
		try:
			return await asyncio.shield(fut)
		finally:
			if fut.done():
				self._inflight = None

	async def run_detection_tick(self) -> bool:
		"""
		One detection pass. Returns True when a new score was committed; every
		recoverable condition leaves the previous score untouched. The alert check
		runs on every tick against the current (new or held) smoothed score.
		"""
		tick = self._board.next_tick()
		self._bump("ticks")

		committed = await self._score_frame(tick)
		state = self._board.snapshot()
		if state.smoothed_score is not None:
			now = state.last_updated if committed else self._clock()
			await self._evaluate_alert(state.smoothed_score, now)
		return committed

	async def _score_frame(self, tick: int) -> bool:
		try:
			keypoints = await self._source.read()
		except Exception as e:
			# Transient source failures count as "no detection".
			self._bump("source_errors")
			self._trace.emit("source_error", "keypoint source failed: %r", e)
			return False
		if keypoints is None:
			self._bump("no_detection")
			self._trace.emit("no_detection", "no pose detected")
			return False

		try:
			features = extract_features(keypoints, self._min_confidence)
		except MissingKeypoint as e:
			self._bump("missing_keypoints")
			self._trace.emit("missing_keypoint", "missing required keypoint: %s", e.name)
			return False
		except InvalidFrame as e:
			self._bump("invalid_frames")
			self._trace.emit("invalid_frame", "%s", e)
			return False
		self._trace.emit("features", "feature vector: %s", features)

		try:
			score01 = await self._predict(features)
		except PredictionFailed as e:
			self._bump("prediction_failures")
			logger.debug("[Scheduler] prediction failed on tick %d: %s", tick, e)
			return False

		raw = to_raw_score(score01)
		prev = self._board.snapshot().smoothed_score
		smoothed = smooth_score(prev, raw)
		if not self._board.commit(tick, raw, smoothed, self._clock()):
			return False
		self._bump("detections")
		self._trace.emit("score", "raw=%s prev=%s smoothed=%s", raw, prev, smoothed)
		return True

	async def _evaluate_alert(self, smoothed: int, now: float) -> None:
		decision = self._policy.evaluate(self._alert_state, self.threshold_config(), smoothed, now)
		if not decision.fire:
			return
		self._alert_state = decision.state
		self._bump("alerts_fired")
		logger.info("[Scheduler] posture alert: score=%d", smoothed)
		try:
			await self._notifier.notify(decision.title, decision.body)
		except Exception:
			self._bump("notify_failures")
			logger.exception("[Scheduler] alert notification failed")

	async def run_sampling_tick(self) -> bool:
		"""Hand the latest smoothed score to persistence, changed or not."""
		state = self._board.snapshot()
		if state.smoothed_score is None:
			return False
		try:
			await self._persistence.record_sample(state.smoothed_score, self._clock())
		except Exception:
			self._bump("sample_failures")
			logger.exception("[Scheduler] recording sample failed")
			return False
		self._bump("samples_recorded")
		return True

	async def run_reminder_tick(self) -> bool:
		if not self.threshold_config().notifications_enabled:
			return False
		try:
			await self._notifier.notify(REMINDER_TITLE, REMINDER_BODY)
		except Exception:
			self._bump("notify_failures")
			logger.exception("[Scheduler] reminder notification failed")
			return False
		self._bump("reminders_sent")
		return True

	# ------------------------------------------------------------------ lifecycle

	async def _periodic(self, name: str, interval_s: float, body: Callable[[], Awaitable[Any]]) -> None:
		"""Run `body` every `interval_s` until stop; missed periods are skipped, not queued."""
		loop = asyncio.get_running_loop()
		stop = self._stop_event
		assert stop is not None
		next_t = loop.time() + interval_s
		while not stop.is_set():
			delay = next_t - loop.time()
			if delay > 0:
				try:
					await asyncio.wait_for(stop.wait(), timeout=delay)
					break
				except asyncio.TimeoutError:
					pass
			try:
				await body()
			except Exception:
				self._bump("tick_errors")
				logger.exception("[Scheduler] %s tick failed", name)
			next_t += interval_s
			now = loop.time()
			if next_t < now:
				next_t = now + interval_s

	def start(self) -> None:
		if self._tasks:
			return
		if self._disposed:
			raise RuntimeError("scheduler already stopped")
		self._stop_event = asyncio.Event()
		cfg = self.config
		self._tasks = [
			asyncio.create_task(self._periodic("detection", cfg.detection_interval_s, self.run_detection_tick), name="posture-detection"),
			asyncio.create_task(self._periodic("sampling", cfg.sampling_interval_s, self.run_sampling_tick), name="posture-sampling"),
			asyncio.create_task(self._periodic("reminder", cfg.reminder_interval_s, self.run_reminder_tick), name="posture-reminder"),
		]
		logger.info(
			"[Scheduler] started (model=%s degraded=%s source=%s)",
			self._model.name(),
			self.degraded,
			self._source.name(),
		)

	async def stop(self, drain_timeout_s: float = 5.0) -> None:
		"""
		Stop all tasks, then dispose the model and close the source.
		Ticks in progress are allowed to finish (up to `drain_timeout_s`) before
		being cancelled; disposal only starts once nothing is in flight.
		"""
		tasks, self._tasks = self._tasks, []
		if self._stop_event is not None:
			self._stop_event.set()
		if tasks:
			_done, pending = await asyncio.wait(tasks, timeout=drain_timeout_s)
			for t in pending:
				t.cancel()
			if pending:
				await asyncio.gather(*pending, return_exceptions=True)
		if self._inflight is not None:
			await asyncio.gather(self._inflight, return_exceptions=True)
			self._inflight = None
		if not self._disposed:
			self._disposed = True
			self._model.dispose()
			# A cancelled read can still hold the source's lock in its worker thread.
			await asyncio.to_thread(self._source.close)
			logger.info("[Scheduler] stopped")
