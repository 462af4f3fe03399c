from typing import Iterable, List, Optional

import pytest

from zen.config import SchedulerConfig
from zen.errors import PredictionFailed
from zen.notify import NotificationSink
from zen.pose.base import KeypointSource
from zen.pose.types import KeypointSet
from zen.scheduler import PostureScheduler
from zen.scoring.base import ScoringModel
from zen.scoring.loader import ModelSelection
from zen.settings import SettingsStore
from zen.db.samples import SampleSink

UPRIGHT = {
	"nose": (0.5, 0.3, 0.9),
	"left_shoulder": (0.35, 0.5, 0.9),
	"right_shoulder": (0.65, 0.5, 0.9),
	"left_ear": (0.4, 0.25, 0.9),
	"right_ear": (0.6, 0.25, 0.9),
}

HUNCHED = dict(UPRIGHT, nose=(0.5, 0.45, 0.9))


@pytest.fixture
def upright() -> KeypointSet:
	return KeypointSet.from_tuples(UPRIGHT, width=1, height=1)


@pytest.fixture
def hunched() -> KeypointSet:
	return KeypointSet.from_tuples(HUNCHED, width=1, height=1)


class ScriptedSource(KeypointSource):
	"""Replays a script of keypoint sets, None (no detection) or exceptions to raise."""

	def __init__(self, script: Iterable = ()) -> None:
		self.script = list(script)
		self.closed = False
		self.reads = 0

	def name(self) -> str:
		return "scripted"

	async def read(self) -> Optional[KeypointSet]:
		self.reads += 1
		if not self.script:
			return None
		item = self.script.pop(0)
		if isinstance(item, Exception):
			raise item
		return item

	def close(self) -> None:
		self.closed = True


class ScriptedModel(ScoringModel):
	"""Returns scripted scores in [0, 1]; an Exception entry is raised instead."""

	def __init__(self, outputs: Iterable = (), default: float = 0.8) -> None:
		self.outputs = list(outputs)
		self.default = default
		self.disposed = False
		self.calls = 0

	def name(self) -> str:
		return "scripted_model"

	@property
	def is_trained(self) -> bool:
		return True

	def predict(self, features) -> float:
		self.calls += 1
		if self.disposed:
			raise PredictionFailed("disposed")
		if not self.outputs:
			return self.default
		item = self.outputs.pop(0)
		if isinstance(item, Exception):
			raise item
		return item

	def dispose(self) -> None:
		self.disposed = True


class RecordingSampleSink(SampleSink):
	def __init__(self, fail: bool = False) -> None:
		self.samples: List[tuple] = []
		self.fail = fail

	async def record_sample(self, score: int, timestamp: float) -> None:
		if self.fail:
			raise ConnectionError("persistence down")
		self.samples.append((score, timestamp))


class RecordingNotifier(NotificationSink):
	def __init__(self, fail: bool = False) -> None:
		self.sent: List[tuple] = []
		self.fail = fail

	async def notify(self, title: str, body: str) -> None:
		if self.fail:
			raise ConnectionError("sink down")
		self.sent.append((title, body))


class FakeClock:
	def __init__(self, t: float = 1000.0) -> None:
		self.t = t

	def __call__(self) -> float:
		return self.t

	def advance(self, seconds: float) -> None:
		self.t += seconds


@pytest.fixture
def clock() -> FakeClock:
	return FakeClock()


@pytest.fixture
def make_scheduler(clock):
	def _make(
		source: Optional[KeypointSource] = None,
		model: Optional[ScoringModel] = None,
		persistence: Optional[SampleSink] = None,
		notifier: Optional[NotificationSink] = None,
		settings: Optional[SettingsStore] = None,
		degraded: bool = False,
		config: Optional[SchedulerConfig] = None,
		**kwargs,
	) -> PostureScheduler:
		return PostureScheduler(
			source=source or ScriptedSource(),
			selection=ModelSelection(model=model or ScriptedModel(), degraded=degraded),
			persistence=persistence or RecordingSampleSink(),
			notifier=notifier or RecordingNotifier(),
			settings=settings or SettingsStore(None),
			config=config,
			clock=clock,
			**kwargs,
		)

	return _make
