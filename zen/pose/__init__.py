"""
Pose input and geometry.

This package defines the model-agnostic KeypointSet type, keypoint source adapters
(e.g., webcam + MediaPipe Pose) and the geometric feature extractor used for scoring.
"""

from zen.config import PoseConfig
from zen.pose.base import KeypointSource, NullKeypointSource


def build_keypoint_source(cfg: PoseConfig) -> KeypointSource:
	"""Create the configured source; capture disabled -> NullKeypointSource."""
	if not cfg.enabled:
		return NullKeypointSource()
	from zen.pose.mediapipe_provider import CameraKeypointSource

	return CameraKeypointSource(
		camera_index=cfg.camera_index,
		model_complexity=cfg.model_complexity,
		min_detection_confidence=cfg.min_detection_confidence,
		min_tracking_confidence=cfg.min_tracking_confidence,
	)
