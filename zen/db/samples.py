"""Posture samples: record_sample plus the sinks the sampling tick hands scores to."""
import logging
import socket
from abc import ABC, abstractmethod
from typing import Optional

from zen.db.pool import _to_dt, get_pool

logger = logging.getLogger(__name__)


async def record_sample(device_id: str, score: int, timestamp: float, duration_s: float = 0.0) -> bool:
	"""Insert one sample row. Returns False when persistence is disabled."""
	pool = get_pool()
	if pool is None:
		logger.debug("[DB] record_sample: pool is None, skipping")
		return False
	async with pool.acquire() as conn:
		await conn.execute(
			"""
			INSERT INTO posture_samples (device_id, score, t, duration_s)
			VALUES ($1, $2, $3, $4);
			""",
			str(device_id),
			max(0, min(100, int(score))),
			_to_dt(float(timestamp)),
			float(duration_s),
		)
	return True


class SampleSink(ABC):
	"""Persistence service contract: fire-and-forget, no acknowledgement, no retry."""

	@abstractmethod
	async def record_sample(self, score: int, timestamp: float) -> None: ...


class DatabaseSampleSink(SampleSink):
	def __init__(self, device_id: Optional[str] = None) -> None:
		self.device_id = (device_id or "").strip() or socket.gethostname()

	async def record_sample(self, score: int, timestamp: float) -> None:
		await record_sample(self.device_id, score, timestamp)


class LogSampleSink(SampleSink):
	"""Used when no database is configured."""

	async def record_sample(self, score: int, timestamp: float) -> None:
		logger.info("[DB] sample (not persisted): score=%s t=%.3f", score, timestamp)
