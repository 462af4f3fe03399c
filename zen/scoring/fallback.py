"""
Closed-form posture heuristic used when no trained model can be loaded.

Five sub-scores, each mapped to [0, 100], are blended with fixed weights and then
stretched around the "good" and "bad" bands. The breakpoints, weights, the 1.15
stretch above 65 and the 0.9 compression below 50 are empirically tuned values
kept for behavioral parity with the desktop app; they have no derivation.
"""
from __future__ import annotations

import logging
from typing import List, Tuple

from zen.errors import PredictionFailed
from zen.pose.features import FeatureVector
from zen.scoring.base import ScoringModel, round_half_up

logger = logging.getLogger(__name__)

WEIGHT_NECK_TILT = 0.25
WEIGHT_DISTANCE = 0.30
WEIGHT_RATIO = 0.25
WEIGHT_EAR = 0.10
WEIGHT_SHOULDER = 0.10

GOOD_BAND_START = 65.0
BAD_BAND_END = 50.0
GOOD_STRETCH = 1.15
BAD_COMPRESSION = 0.9

# (features, label) pairs scored at startup as a sanity log, excellent -> very bad.
REFERENCE_POSTURES: List[Tuple[Tuple[float, ...], str]] = [
	((0.17, 0.4, 170, 0.15, 0.15, 50, 50), "excellent"),
	((0.16, 0.5, 160, 0.18, 0.18, 45, 45), "good"),
	((0.14, 0.6, 150, 0.2, 0.2, 40, 40), "slightly above average"),
	((0.12, 0.65, 140, 0.22, 0.22, 35, 35), "average"),
	((0.1, 0.7, 130, 0.25, 0.25, 30, 30), "bad"),
	((0.08, 0.85, 120, 0.3, 0.3, 25, 25), "very bad"),
]


def score_band(score: int) -> str:
	if score >= GOOD_BAND_START:
		return "GOOD"
	if score >= BAD_BAND_END:
		return "AVERAGE"
	return "BAD"


def neck_tilt_score(neck_tilt_angle: float) -> float:
	# Upright heads put the nose-ear angle close to 180.
	angle = max(0.0, float(neck_tilt_angle))
	return (angle / 180.0) ** 1.2 * 100.0


def distance_score(dist_nose_shoulders: float) -> float:
	d = float(dist_nose_shoulders)
	if d < 0.08:
		return 0.0
	if d < 0.12:
		return 30.0 + (d - 0.08) * 375.0
	if d < 0.16:
		return 45.0 + (d - 0.12) * 500.0
	if d < 0.22:
		return 65.0 + (d - 0.16) * 417.0
	# Leaning back: gentle falloff from 90, never below 50.
	return max(50.0, 90.0 - (d - 0.22) * 250.0)


def ratio_score(ratio_nose_shoulders: float) -> float:
	r = float(ratio_nose_shoulders)
	if r < 0.4:
		return 85.0 + (0.4 - r) * 37.5
	if r < 0.5:
		return 65.0 + (0.5 - r) * 200.0
	if r < 0.65:
		return 45.0 + (0.65 - r) * 133.0
	if r < 0.8:
		return 20.0 + (0.8 - r) * 167.0
	return max(0.0, 20.0 - (r - 0.8) * 60.0)


def ear_score(dist_left_ear_nose: float, dist_right_ear_nose: float) -> float:
	asymmetry = abs(float(dist_left_ear_nose) - float(dist_right_ear_nose))
	avg = (float(dist_left_ear_nose) + float(dist_right_ear_nose)) / 2.0
	return max(0.0, 100.0 - asymmetry * 300.0 - avg * 150.0)


def shoulder_score(angle_left_shoulder: float, angle_right_shoulder: float) -> float:
	avg = (float(angle_left_shoulder) + float(angle_right_shoulder)) / 2.0
	asymmetry = abs(float(angle_left_shoulder) - float(angle_right_shoulder))
	return min(100.0, max(0.0, 20.0 + avg * 1.2 - asymmetry * 1.5))


def combined_score(features: FeatureVector) -> float:
	"""Weighted blend of the five sub-scores, before band adjustment."""
	return (
		neck_tilt_score(features.neck_tilt_angle) * WEIGHT_NECK_TILT
		+ distance_score(features.dist_nose_shoulders) * WEIGHT_DISTANCE
		+ ratio_score(features.ratio_nose_shoulders) * WEIGHT_RATIO
		+ ear_score(features.dist_left_ear_nose, features.dist_right_ear_nose) * WEIGHT_EAR
		+ shoulder_score(features.angle_left_shoulder, features.angle_right_shoulder) * WEIGHT_SHOULDER
	)


def adjust_bands(score: float) -> float:
	if score > GOOD_BAND_START:
		return GOOD_BAND_START + (score - GOOD_BAND_START) * GOOD_STRETCH
	if score < BAD_BAND_END:
		return score * BAD_COMPRESSION
	return score


class HeuristicScoringModel(ScoringModel):
	"""Fallback model: no weights, no external dependencies, always constructible."""

	def __init__(self) -> None:
		self._disposed = False

	def name(self) -> str:
		return "fallback_heuristic_model"

	@property
	def is_trained(self) -> bool:
		return False

	def predict(self, features: FeatureVector) -> float:
		if self._disposed:
			raise PredictionFailed("fallback model already disposed")
		fv = FeatureVector(*features)
		final = adjust_bands(combined_score(fv))
		final = min(100, max(0, round_half_up(final)))
		return final / 100.0

	def dispose(self) -> None:
		if not self._disposed:
			logger.debug("[Scoring] disposing fallback model")
		self._disposed = True

	def self_check(self) -> List[Tuple[str, int, str]]:
		"""Score the reference postures; returns (label, score, band) per posture."""
		out = []
		for values, label in REFERENCE_POSTURES:
			score = round_half_up(self.predict(FeatureVector(*values)) * 100.0)
			out.append((label, score, score_band(score)))
		return out
