from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from zen.errors import ModelUnavailable
from zen.scoring.base import ScoringModel
from zen.scoring.fallback import HeuristicScoringModel
from zen.scoring.trained import DenseScoringModel, EstimatorScoringModel, probe

logger = logging.getLogger(__name__)

JSON_SUFFIXES = (".json",)
JOBLIB_SUFFIXES = (".joblib", ".pkl", ".pickle")


@dataclass(frozen=True)
class ModelSelection:
	"""Outcome of startup model selection; `degraded` means the fallback is active."""

	model: ScoringModel
	degraded: bool
	reason: Optional[str] = None


def load_trained_model(path: Optional[str | Path]) -> ScoringModel:
	"""
	Load and probe a trained model. Any failure is reported as ModelUnavailable.
	"""
	if not path:
		raise ModelUnavailable("no model path configured")
	p = Path(path).expanduser()
	if not p.exists():
		raise ModelUnavailable(f"model file not found: {p}")

	suffix = p.suffix.lower()
	if suffix in JSON_SUFFIXES:
		model: ScoringModel = DenseScoringModel.from_json(p)
	elif suffix in JOBLIB_SUFFIXES:
		model = EstimatorScoringModel.from_joblib(p)
	else:
		raise ModelUnavailable(f"unsupported model format: {p.name}")

	try:
		probe(model)
	except ModelUnavailable:
		model.dispose()
		raise
	return model


def select_scoring_model(path: Optional[str | Path]) -> ModelSelection:
	"""
	Try the trained model first; on any failure fall back to the heuristic model.
	Never raises.
	"""
	try:
		model = load_trained_model(path)
		logger.info("[Scoring] trained model loaded from %s", path)
		return ModelSelection(model=model, degraded=False)
	except ModelUnavailable as e:
		reason = str(e)
		logger.warning("[Scoring] using fallback heuristic model (degraded mode): %s", reason)

	fallback = HeuristicScoringModel()
	for label, score, band in fallback.self_check():
		logger.info("[Scoring] fallback reference posture %-22s score=%3d (%s)", label, score, band)
	return ModelSelection(model=fallback, degraded=True, reason=reason)
