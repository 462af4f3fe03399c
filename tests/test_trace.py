import logging

from conftest import FakeClock
from zen.trace import TraceHook


def test_disabled_hook_logs_nothing(caplog):
	hook = TraceHook(enabled=False)
	with caplog.at_level(logging.DEBUG, logger="zen.trace"):
		assert hook.emit("features", "x=%s", 1) is False
	assert caplog.records == []


def test_rate_limited_per_key(caplog):
	clock = FakeClock(0.0)
	hook = TraceHook(enabled=True, min_interval_s=5.0, clock=clock)
	with caplog.at_level(logging.DEBUG, logger="zen.trace"):
		assert hook.emit("score", "raw=%s", 80)
		assert not hook.emit("score", "raw=%s", 81)
		assert not hook.emit("score", "raw=%s", 82)
		assert hook.emit("no_detection", "no pose detected")
		clock.advance(5.0)
		assert hook.emit("score", "raw=%s", 83)
	messages = [r.getMessage() for r in caplog.records]
	assert messages == [
		"[Trace:score] raw=80",
		"[Trace:no_detection] no pose detected",
		"[Trace:score] raw=83 (+2 suppressed)",
	]
	assert hook.suppressed == {}
