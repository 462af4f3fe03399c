"""
User settings store (threshold + notification toggle), persisted as JSON keyed by name.
"""
from __future__ import annotations

import json
import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from zen.config import _as_bool

logger = logging.getLogger(__name__)

KEY_THRESHOLD = "postureThreshold"
KEY_NOTIFICATIONS = "notificationsEnabled"

DEFAULT_THRESHOLD = 70
DEFAULT_NOTIFICATIONS_ENABLED = True


@dataclass(frozen=True)
class ThresholdConfig:
	value: int = DEFAULT_THRESHOLD
	notifications_enabled: bool = DEFAULT_NOTIFICATIONS_ENABLED


def clamp_threshold(value: Any) -> int:
	try:
		v = int(value)
	except (TypeError, ValueError):
		return DEFAULT_THRESHOLD
	return max(0, min(100, v))


class SettingsStore:
	"""
	Small JSON key/value store. Reads come from memory; every write is flushed to disk
	via a temp file + replace so a crash never leaves a half-written file.
	"""

	def __init__(self, path: Optional[str | Path] = None) -> None:
		self.path = Path(path).expanduser() if path else None
		self._lock = threading.Lock()
		self._values: Dict[str, Any] = {}
		self._load()

	def _load(self) -> None:
		if self.path is None or not self.path.exists():
			return
		try:
			raw = json.loads(self.path.read_text(encoding="utf-8"))
		except (OSError, ValueError) as e:
			logger.warning("[Settings] ignoring unreadable settings file %s: %s", self.path, e)
			return
		if isinstance(raw, dict):
			self._values = dict(raw)

	def _flush(self, values: Dict[str, Any]) -> None:
		if self.path is None:
			return
		self.path.parent.mkdir(parents=True, exist_ok=True)
		tmp = self.path.with_suffix(self.path.suffix + ".tmp")
		tmp.write_text(json.dumps(values, indent=2, sort_keys=True), encoding="utf-8")
		os.replace(tmp, self.path)

	def _commit(self, changes: Dict[str, Any]) -> None:
		# Caller holds the lock. Values only change once the file write succeeded.
		values = dict(self._values)
		values.update(changes)
		self._flush(values)
		self._values = values

	def get(self, name: str, default: Any = None) -> Any:
		with self._lock:
			return self._values.get(name, default)

	def set(self, name: str, value: Any) -> None:
		with self._lock:
			self._commit({name: value})

	def threshold_config(self) -> ThresholdConfig:
		with self._lock:
			value = self._values.get(KEY_THRESHOLD, DEFAULT_THRESHOLD)
			enabled = self._values.get(KEY_NOTIFICATIONS, DEFAULT_NOTIFICATIONS_ENABLED)
		return ThresholdConfig(
			value=clamp_threshold(value),
			notifications_enabled=_as_bool(enabled, DEFAULT_NOTIFICATIONS_ENABLED),
		)

	def update_threshold_config(
		self,
		value: Optional[int] = None,
		notifications_enabled: Optional[bool] = None,
	) -> ThresholdConfig:
		changes: Dict[str, Any] = {}
		if value is not None:
			changes[KEY_THRESHOLD] = clamp_threshold(value)
		if notifications_enabled is not None:
			changes[KEY_NOTIFICATIONS] = bool(notifications_enabled)
		with self._lock:
			self._commit(changes)
		logger.info("[Settings] threshold config updated: %s", self.threshold_config())
		return self.threshold_config()
