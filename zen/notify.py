"""Notification sinks for posture alerts and exercise reminders. No delivery guarantee."""
from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Iterable, List

logger = logging.getLogger(__name__)


class NotificationSink(ABC):
	@abstractmethod
	async def notify(self, title: str, body: str) -> None: ...


class LogNotificationSink(NotificationSink):
	async def notify(self, title: str, body: str) -> None:
		logger.info("[Notify] %s: %s", title, body)


class BroadcastNotificationSink(NotificationSink):
	"""Pushes notifications to every connected WebSocket client."""

	def __init__(self, manager: Any) -> None:
		self._manager = manager

	async def notify(self, title: str, body: str) -> None:
		await self._manager.broadcast_json(
			{"type": "notification", "title": title, "body": body, "t": time.time()}
		)


class FanoutNotificationSink(NotificationSink):
	"""Delivers to several sinks; one failing sink does not block the others."""

	def __init__(self, sinks: Iterable[NotificationSink]) -> None:
		self.sinks: List[NotificationSink] = list(sinks)

	async def notify(self, title: str, body: str) -> None:
		for sink in self.sinks:
			try:
				await sink.notify(title, body)
			except Exception:
				logger.exception("[Notify] %s failed to deliver %r", type(sink).__name__, title)
