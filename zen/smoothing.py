"""
Adaptive exponential smoothing of raw posture scores.

The factor weights the previous value: lower factors follow the raw score faster.
Bad posture (raw < 50, and more so raw < 30) uses a lower factor so degradation
shows up quickly; any jump larger than 15 points gets +0.2 extra damping (capped
at 0.5) so a single noisy frame cannot swing the displayed score.
"""
from __future__ import annotations

from typing import Optional

from zen.scoring.base import round_half_up

BASE_FACTOR = 0.3
BAD_FACTOR = 0.2
VERY_BAD_FACTOR = 0.1
BAD_SCORE = 50
VERY_BAD_SCORE = 30
JUMP_THRESHOLD = 15
JUMP_DAMPING = 0.2
MAX_FACTOR = 0.5


def clamp_score(value: int) -> int:
	return max(0, min(100, int(value)))


def to_raw_score(score01: float) -> int:
	"""Model output in [0, 1] -> integer percent."""
	return clamp_score(round_half_up(float(score01) * 100.0))


def smoothing_factor(prev: Optional[int], raw: int) -> float:
	factor = BASE_FACTOR
	if raw < BAD_SCORE:
		factor = BAD_FACTOR
	if raw < VERY_BAD_SCORE:
		factor = VERY_BAD_FACTOR
	if prev is not None and abs(raw - prev) > JUMP_THRESHOLD:
		factor = min(MAX_FACTOR, factor + JUMP_DAMPING)
	return factor


def smooth_score(prev: Optional[int], raw: int) -> int:
	"""
	Blend the new raw score into the previous smoothed score.
	The first sample (prev is None) is taken as-is.
	"""
	raw = int(raw)
	if prev is None:
		return clamp_score(raw)
	f = smoothing_factor(prev, raw)
	return clamp_score(round_half_up(prev * f + raw * (1.0 - f)))
