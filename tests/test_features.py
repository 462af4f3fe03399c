import math

import pytest

from conftest import UPRIGHT
from zen.errors import InvalidFrame, MissingKeypoint
from zen.pose.features import FEATURE_NAMES, angle_abc, distance_2d, extract_features
from zen.pose.types import KeypointSet


def test_upright_vector(upright):
	fv = extract_features(upright)
	assert len(fv) == len(FEATURE_NAMES) == 7
	assert fv.dist_nose_shoulders == pytest.approx(0.2)
	assert fv.ratio_nose_shoulders == pytest.approx(0.2 / 0.3)
	assert fv.neck_tilt_angle == pytest.approx(math.degrees(math.acos(-0.6)))
	assert fv.dist_left_ear_nose == pytest.approx(fv.dist_right_ear_nose)
	assert fv.angle_left_shoulder == pytest.approx(fv.angle_right_shoulder)


def test_coordinates_are_normalized_by_frame_size():
	scaled = {name: (x * 640, y * 480, s) for name, (x, y, s) in UPRIGHT.items()}
	# Uniform scale per axis must not change the normalized geometry.
	fv_px = extract_features(KeypointSet.from_tuples(scaled, width=640, height=480))
	fv_unit = extract_features(KeypointSet.from_tuples(UPRIGHT, width=1, height=1))
	assert fv_px == pytest.approx(fv_unit)


def test_hunched_nose_drops_toward_shoulders(upright, hunched):
	assert extract_features(hunched).dist_nose_shoulders < extract_features(upright).dist_nose_shoulders


@pytest.mark.parametrize("score", [0.0, 0.3])
def test_low_confidence_keypoint_is_missing(score):
	points = dict(UPRIGHT, left_ear=(0.4, 0.25, score))
	with pytest.raises(MissingKeypoint) as ei:
		extract_features(KeypointSet.from_tuples(points, width=1, height=1))
	assert ei.value.name == "left_ear"


def test_absent_keypoint_is_missing():
	points = {k: v for k, v in UPRIGHT.items() if k != "nose"}
	with pytest.raises(MissingKeypoint):
		extract_features(KeypointSet.from_tuples(points, width=1, height=1))


@pytest.mark.parametrize("width,height", [(0, 480), (640, 0), (-1, 480)])
def test_invalid_frame(width, height):
	with pytest.raises(InvalidFrame):
		extract_features(KeypointSet.from_tuples(UPRIGHT, width=width, height=height))


def test_angle_abc():
	assert angle_abc((1.0, 0.0), (0.0, 0.0), (0.0, 1.0)) == pytest.approx(90.0)
	assert angle_abc((1.0, 0.0), (0.0, 0.0), (-1.0, 0.0)) == pytest.approx(180.0)
	assert angle_abc((1.0, 0.0), (0.0, 0.0), (2.0, 0.0)) == pytest.approx(0.0)
	# Degenerate ray
	assert angle_abc((0.0, 0.0), (0.0, 0.0), (1.0, 1.0)) == 180.0


def test_distance_2d():
	assert distance_2d((0.0, 0.0), (3.0, 4.0)) == pytest.approx(5.0)
