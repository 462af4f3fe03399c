"""Recoverable pipeline errors. None of these stop the scheduler."""
from __future__ import annotations


class PostureError(Exception):
	"""Base class for posture pipeline errors."""


class MissingKeypoint(PostureError):
	"""A required landmark is absent or below the confidence cutoff."""

	def __init__(self, name: str) -> None:
		super().__init__(f"missing required keypoint: {name}")
		self.name = name


class InvalidFrame(PostureError):
	"""Frame dimensions cannot be used to normalize keypoints."""

	def __init__(self, width: float, height: float) -> None:
		super().__init__(f"invalid frame size: {width}x{height}")
		self.width = width
		self.height = height


class ModelUnavailable(PostureError):
	"""The trained scoring model could not be loaded."""


class PredictionFailed(PostureError):
	"""A scoring model failed or produced an unusable value for one prediction."""
