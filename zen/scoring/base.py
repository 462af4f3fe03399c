from __future__ import annotations

import math
from abc import ABC, abstractmethod

from zen.errors import PredictionFailed
from zen.pose.features import FeatureVector


def round_half_up(value: float) -> int:
	"""Round .5 away from the floor (Python's round() is banker's rounding)."""
	return int(math.floor(float(value) + 0.5))


class ScoringModel(ABC):
	"""
	Posture scoring model interface.

	`predict` maps one feature vector to a score in [0, 1]. Exactly one model is
	active per session; it is shared read-only by all ticks once constructed.
	"""

	@abstractmethod
	def name(self) -> str: ...

	@property
	@abstractmethod
	def is_trained(self) -> bool: ...

	@abstractmethod
	def predict(self, features: FeatureVector) -> float: ...

	@abstractmethod
	def dispose(self) -> None: ...


def checked_score01(value: float, model_name: str) -> float:
	"""Reject non-finite or out-of-range model outputs."""
	try:
		v = float(value)
	except (TypeError, ValueError) as e:
		raise PredictionFailed(f"{model_name}: non-numeric output {value!r}") from e
	if not math.isfinite(v):
		raise PredictionFailed(f"{model_name}: non-finite output {v!r}")
	if v < 0.0 or v > 1.0:
		raise PredictionFailed(f"{model_name}: output {v!r} outside [0, 1]")
	return v
