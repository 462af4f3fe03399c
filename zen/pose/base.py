from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from zen.pose.types import KeypointSet


class KeypointSource(ABC):
	"""
	Keypoint source interface.

	`read()` returns the keypoints for the current frame, or None when nothing was
	detected. Implementations may raise on transient failures; callers treat that
	as "no detection".
	"""

	@abstractmethod
	def name(self) -> str: ...

	@abstractmethod
	async def read(self) -> Optional[KeypointSet]: ...

	@abstractmethod
	def close(self) -> None: ...


class NullKeypointSource(KeypointSource):
	"""Source used when pose capture is disabled; never detects anything."""

	def name(self) -> str:
		return "null"

	async def read(self) -> Optional[KeypointSet]:
		return None

	def close(self) -> None:
		return None
