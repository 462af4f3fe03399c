from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass(frozen=True)
class Keypoint:
	"""
	A single 2D keypoint in pixel coordinates.
	"""

	name: str
	x_px: float
	y_px: float
	score: float  # confidence/visibility [0..1] best-effort


@dataclass(frozen=True)
class KeypointSet:
	"""
	Model-agnostic pose output for a single camera frame.

	- Coordinates are in source-frame pixel space; features normalize by width/height.
	- Produced once per detection tick and never mutated afterwards.
	"""

	backend: str
	width: int
	height: int
	t_host: Optional[float] = None
	keypoints: Dict[str, Keypoint] = field(default_factory=dict)

	def get(self, name: str) -> Optional[Keypoint]:
		if not self.keypoints:
			return None
		return self.keypoints.get(name)

	@classmethod
	def from_tuples(cls, points: Dict[str, tuple], width: int, height: int, backend: str = "manual", t_host: Optional[float] = None) -> "KeypointSet":
		"""Build a set from ``{name: (x, y, score)}``."""
		kps = {
			name: Keypoint(name=name, x_px=float(x), y_px=float(y), score=float(s))
			for name, (x, y, s) in points.items()
		}
		return cls(backend=backend, width=width, height=height, t_host=t_host, keypoints=kps)
