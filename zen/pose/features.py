from __future__ import annotations

import math
from typing import Dict, NamedTuple, Tuple

from zen.errors import InvalidFrame, MissingKeypoint
from zen.pose.types import KeypointSet


REQUIRED_KEYPOINTS = ("nose", "left_shoulder", "right_shoulder", "left_ear", "right_ear")

DEFAULT_MIN_CONFIDENCE = 0.3

Point = Tuple[float, float]


class FeatureVector(NamedTuple):
	"""The 7 geometric measurements fed to the scoring model, in model input order."""

	dist_nose_shoulders: float
	ratio_nose_shoulders: float
	neck_tilt_angle: float
	dist_left_ear_nose: float
	dist_right_ear_nose: float
	angle_left_shoulder: float
	angle_right_shoulder: float


FEATURE_NAMES = FeatureVector._fields


def distance_2d(a: Point, b: Point) -> float:
	return math.sqrt((b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2)


def midpoint(a: Point, b: Point) -> Point:
	return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


def angle_abc(a: Point, b: Point, c: Point) -> float:
	"""
	Angle at B formed by the rays B->A and B->C, in degrees [0..180].
	A zero-length ray is degenerate and reported as 180.
	"""
	abx, aby = a[0] - b[0], a[1] - b[1]
	cbx, cby = c[0] - b[0], c[1] - b[1]
	mag_ab = math.sqrt(abx * abx + aby * aby)
	mag_cb = math.sqrt(cbx * cbx + cby * cby)
	if mag_ab == 0.0 or mag_cb == 0.0:
		return 180.0
	cos_theta = (abx * cbx + aby * cby) / (mag_ab * mag_cb)
	cos_theta = max(-1.0, min(1.0, cos_theta))
	return math.degrees(math.acos(cos_theta))


def _normalized_points(keypoints: KeypointSet, min_confidence: float) -> Dict[str, Point]:
	width = float(keypoints.width)
	height = float(keypoints.height)
	if not (width > 0.0 and height > 0.0):
		raise InvalidFrame(keypoints.width, keypoints.height)

	out: Dict[str, Point] = {}
	for name in REQUIRED_KEYPOINTS:
		kp = keypoints.get(name)
		if kp is None or not (float(kp.score) > min_confidence):
			raise MissingKeypoint(name)
		out[name] = (float(kp.x_px) / width, float(kp.y_px) / height)
	return out


def extract_features(keypoints: KeypointSet, min_confidence: float = DEFAULT_MIN_CONFIDENCE) -> FeatureVector:
	"""
	Build the posture feature vector from one keypoint set.

	Raises InvalidFrame for non-positive frame dimensions and MissingKeypoint for the
	first required landmark that is absent or not above `min_confidence`.
	"""
	pts = _normalized_points(keypoints, min_confidence)
	nose = pts["nose"]
	lsho = pts["left_shoulder"]
	rsho = pts["right_shoulder"]
	lear = pts["left_ear"]
	rear = pts["right_ear"]

	msho = midpoint(lsho, rsho)

	dist_nose_shoulders = distance_2d(nose, msho)
	dist_shoulders = distance_2d(lsho, rsho)
	ratio = dist_nose_shoulders / dist_shoulders if dist_shoulders > 0.0 else 0.0

	return FeatureVector(
		dist_nose_shoulders=dist_nose_shoulders,
		ratio_nose_shoulders=ratio,
		neck_tilt_angle=angle_abc(lear, nose, rear),
		dist_left_ear_nose=distance_2d(lear, nose),
		dist_right_ear_nose=distance_2d(rear, nose),
		angle_left_shoulder=angle_abc(lear, lsho, nose),
		angle_right_shoulder=angle_abc(rear, rsho, nose),
	)
