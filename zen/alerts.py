"""
Threshold alert gate: armed until an alert fires, then cooling down for `cooldown_s`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from zen.settings import ThresholdConfig

DEFAULT_COOLDOWN_S = 60.0

ALERT_TITLE = "Posture Alert"
REMINDER_TITLE = "Time for Posture Exercises!"
REMINDER_BODY = "Let's do some stretches to maintain good posture"


def alert_body(score: int) -> str:
	return f"Your posture score is {score}. Please correct your posture."


@dataclass(frozen=True)
class AlertState:
	last_alert_t: Optional[float] = None


@dataclass(frozen=True)
class AlertDecision:
	fire: bool
	state: AlertState
	title: str = ""
	body: str = ""


class AlertPolicy:
	def __init__(self, cooldown_s: float = DEFAULT_COOLDOWN_S) -> None:
		self.cooldown_s = max(0.0, float(cooldown_s))

	def cooling_down(self, state: AlertState, now: float) -> bool:
		if state.last_alert_t is None:
			return False
		return (now - state.last_alert_t) < self.cooldown_s

	def evaluate(self, state: AlertState, threshold: ThresholdConfig, smoothed: int, now: float) -> AlertDecision:
		"""Decide whether this tick fires an alert; returns the next alert state."""
		if not threshold.notifications_enabled or smoothed >= threshold.value:
			return AlertDecision(fire=False, state=state)
		if self.cooling_down(state, now):
			return AlertDecision(fire=False, state=state)
		return AlertDecision(
			fire=True,
			state=AlertState(last_alert_t=now),
			title=ALERT_TITLE,
			body=alert_body(smoothed),
		)
