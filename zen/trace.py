from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Optional

logger = logging.getLogger("zen.trace")


class TraceHook:
	"""
	Rate-limited debug tracing for per-frame diagnostics.

	At most one message per key is logged every `min_interval_s`; the rest are
	counted. Tracing never changes what the pipeline does.
	"""

	def __init__(
		self,
		enabled: bool = False,
		min_interval_s: float = 5.0,
		clock: Optional[Callable[[], float]] = None,
		log: Optional[logging.Logger] = None,
	) -> None:
		self.enabled = bool(enabled)
		self.min_interval_s = max(0.0, float(min_interval_s))
		self._clock = clock or time.monotonic
		self._log = log or logger
		self._last_emit: Dict[str, float] = {}
		self.suppressed: Dict[str, int] = {}

	def emit(self, key: str, message: str, *args) -> bool:
		if not self.enabled:
			return False
		now = self._clock()
		last = self._last_emit.get(key)
		if last is not None and (now - last) < self.min_interval_s:
			self.suppressed[key] = self.suppressed.get(key, 0) + 1
			return False
		self._last_emit[key] = now
		skipped = self.suppressed.pop(key, 0)
		if skipped:
			self._log.debug("[Trace:%s] " + message + " (+%d suppressed)", key, *args, skipped)
		else:
			self._log.debug("[Trace:%s] " + message, key, *args)
		return True
