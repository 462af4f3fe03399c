"""
Shared score state. The scheduler is the only writer; readers get immutable snapshots.
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ScoreState:
	raw_score: Optional[int] = None
	smoothed_score: Optional[int] = None
	last_updated: Optional[float] = None
	tick: int = 0

	def as_dict(self) -> Dict[str, Any]:
		return {
			"raw_score": self.raw_score,
			"smoothed_score": self.smoothed_score,
			"last_updated": self.last_updated,
			"tick": self.tick,
		}


class ScoreBoard:
	"""
	Holds the latest committed ScoreState.

	Each write carries the id of the detection tick that produced it; a write from
	an older tick than the last committed one is dropped. The state object is
	replaced in a single assignment, so a reader never sees a partial update.
	"""

	def __init__(self) -> None:
		self._state = ScoreState()
		self._ticks = itertools.count(1)
		self.dropped_writes = 0

	def next_tick(self) -> int:
		return next(self._ticks)

	def snapshot(self) -> ScoreState:
		return self._state

	def commit(self, tick: int, raw_score: int, smoothed_score: int, now: float) -> bool:
		if tick <= self._state.tick:
			self.dropped_writes += 1
			return False
		self._state = ScoreState(raw_score=int(raw_score), smoothed_score=int(smoothed_score), last_updated=float(now), tick=int(tick))
		return True
