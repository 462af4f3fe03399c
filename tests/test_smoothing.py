import pytest

from zen.smoothing import smooth_score, smoothing_factor, to_raw_score


def test_first_sample_is_taken_as_is():
	assert smooth_score(None, 42) == 42


def test_sudden_drop_follows_quickly():
	# raw < 30 -> 0.1, jump > 15 -> +0.2: 80 * 0.3 + 20 * 0.7
	assert smoothing_factor(80, 20) == pytest.approx(0.3)
	assert smooth_score(80, 20) == 38


def test_small_change_in_good_range():
	assert smoothing_factor(70, 80) == pytest.approx(0.3)
	assert smooth_score(70, 80) == 77


def test_jump_damping_is_capped():
	assert smoothing_factor(10, 90) == pytest.approx(0.5)


def test_converges_on_constant_input():
	s = None
	for _ in range(40):
		s = smooth_score(s if s is not None else 90, 40)
	assert s == 40


@pytest.mark.parametrize("prev", [0, 25, 50, 75, 100])
def test_worse_raw_scores_never_get_more_damping(prev):
	# Within the same jump class, lower raw scores use a smaller (or equal) factor.
	near = [r for r in range(0, 101) if abs(r - prev) <= 15]
	far = [r for r in range(0, 101) if abs(r - prev) > 15]
	for group in (near, far):
		factors = [smoothing_factor(prev, r) for r in group]
		assert factors == sorted(factors)


def test_smoothed_stays_in_range():
	for prev in range(0, 101, 5):
		for raw in range(0, 101, 5):
			assert 0 <= smooth_score(prev, raw) <= 100


def test_to_raw_score():
	assert to_raw_score(0.0) == 0
	assert to_raw_score(0.645) == 65
	assert to_raw_score(1.0) == 100
