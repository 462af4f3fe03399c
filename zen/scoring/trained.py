"""
Scoring models backed by learned weights.

Two on-disk formats are supported:

- JSON dense weights: a list of [kernel, bias, kernel, bias, ...] arrays for a small
  feed-forward network (7 -> 16 -> 16 -> 1 with relu, relu, sigmoid in the shipped
  model). Arrays may be flat or nested lists, or objects whose values are the numbers.
- joblib: any persisted estimator exposing `predict_proba` or `predict`
  (e.g. the scikit-learn MLPClassifier written by scripts/train_scoring_model.py).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

import joblib
import numpy as np

from zen.errors import ModelUnavailable, PredictionFailed
from zen.pose.features import FEATURE_NAMES, FeatureVector
from zen.scoring.base import ScoringModel, checked_score01

logger = logging.getLogger(__name__)

N_FEATURES = len(FEATURE_NAMES)

Layer = Tuple[np.ndarray, np.ndarray]


def _relu(x: np.ndarray) -> np.ndarray:
	return np.maximum(x, 0.0)


def _sigmoid(x: np.ndarray) -> np.ndarray:
	return 1.0 / (1.0 + np.exp(-x))


def _as_values(entry: Any) -> Any:
	# Weight exports sometimes serialize typed arrays as {"0": v0, "1": v1, ...}.
	if isinstance(entry, dict):
		return [_as_values(v) for v in entry.values()]
	if isinstance(entry, list):
		return [_as_values(v) for v in entry]
	return entry


def _layers_from_arrays(arrays: Sequence[Any]) -> List[Layer]:
	if len(arrays) < 2 or len(arrays) % 2 != 0:
		raise ModelUnavailable(f"expected kernel/bias pairs, got {len(arrays)} arrays")
	layers: List[Layer] = []
	n_in = N_FEATURES
	for i in range(0, len(arrays), 2):
		try:
			bias = np.asarray(_as_values(arrays[i + 1]), dtype=np.float64).reshape(-1)
			n_out = int(bias.shape[0])
			kernel = np.asarray(_as_values(arrays[i]), dtype=np.float64).reshape(n_in, n_out)
		except (TypeError, ValueError) as e:
			raise ModelUnavailable(f"layer {i // 2}: malformed weights ({e})") from e
		layers.append((kernel, bias))
		n_in = n_out
	if n_in != 1:
		raise ModelUnavailable(f"final layer must have 1 unit, got {n_in}")
	return layers


class DenseScoringModel(ScoringModel):
	"""Feed-forward network evaluated with numpy: relu hidden layers, sigmoid output."""

	def __init__(self, layers: List[Layer], source: Optional[str] = None) -> None:
		self._layers: Optional[List[Layer]] = [(np.array(k, dtype=np.float64), np.array(b, dtype=np.float64)) for k, b in layers]
		self.source = source

	@classmethod
	def from_arrays(cls, arrays: Sequence[Any], source: Optional[str] = None) -> "DenseScoringModel":
		return cls(_layers_from_arrays(arrays), source=source)

	@classmethod
	def from_json(cls, path: str | Path) -> "DenseScoringModel":
		p = Path(path)
		try:
			raw = json.loads(p.read_text(encoding="utf-8"))
		except (OSError, ValueError) as e:
			raise ModelUnavailable(f"cannot read weights {p}: {e}") from e
		if not isinstance(raw, list):
			raise ModelUnavailable(f"weights file {p} is not a list of arrays")
		return cls.from_arrays(raw, source=str(p))

	def to_arrays(self) -> List[list]:
		if self._layers is None:
			return []
		out: List[list] = []
		for kernel, bias in self._layers:
			out.append(kernel.tolist())
			out.append(bias.tolist())
		return out

	def save_json(self, path: str | Path) -> None:
		Path(path).write_text(json.dumps(self.to_arrays()), encoding="utf-8")

	def name(self) -> str:
		return "trained_model"

	@property
	def is_trained(self) -> bool:
		return True

	def predict(self, features: FeatureVector) -> float:
		layers = self._layers
		if layers is None:
			raise PredictionFailed("dense model already disposed")
		try:
			x = np.asarray(features, dtype=np.float64).reshape(1, N_FEATURES)
			last = len(layers) - 1
			for i, (kernel, bias) in enumerate(layers):
				x = x @ kernel + bias
				x = _sigmoid(x) if i == last else _relu(x)
			value = float(x[0, 0])
		except (ValueError, FloatingPointError) as e:
			raise PredictionFailed(f"dense model: {e}") from e
		return checked_score01(value, self.name())

	def dispose(self) -> None:
		self._layers = None


class EstimatorScoringModel(ScoringModel):
	"""Wraps a persisted estimator; probability of the positive class is the score."""

	def __init__(self, estimator: Any, source: Optional[str] = None) -> None:
		if not (hasattr(estimator, "predict_proba") or hasattr(estimator, "predict")):
			raise ModelUnavailable(f"{type(estimator).__name__} has no predict/predict_proba")
		self._estimator: Any = estimator
		self.source = source

	@classmethod
	def from_joblib(cls, path: str | Path) -> "EstimatorScoringModel":
		p = Path(path)
		try:
			estimator = joblib.load(p)
		except Exception as e:
			# joblib/pickle can raise nearly anything for a corrupt file.
			raise ModelUnavailable(f"cannot load estimator {p}: {e!r}") from e
		return cls(estimator, source=str(p))

	def name(self) -> str:
		return "trained_model"

	@property
	def is_trained(self) -> bool:
		return True

	def predict(self, features: FeatureVector) -> float:
		est = self._estimator
		if est is None:
			raise PredictionFailed("estimator model already disposed")
		x = np.asarray(features, dtype=np.float64).reshape(1, N_FEATURES)
		try:
			if hasattr(est, "predict_proba"):
				proba = np.asarray(est.predict_proba(x), dtype=np.float64)
				value = float(proba[0, -1])
			else:
				value = float(np.asarray(est.predict(x), dtype=np.float64).reshape(-1)[0])
		except Exception as e:
			raise PredictionFailed(f"estimator: {e!r}") from e
		return checked_score01(value, self.name())

	def dispose(self) -> None:
		self._estimator = None


def probe(model: ScoringModel) -> float:
	"""Run one prediction on a neutral vector; raises ModelUnavailable if it misbehaves."""
	neutral = FeatureVector(0.18, 0.55, 150.0, 0.15, 0.15, 45.0, 45.0)
	try:
		return model.predict(neutral)
	except PredictionFailed as e:
		raise ModelUnavailable(f"probe prediction failed: {e}") from e
