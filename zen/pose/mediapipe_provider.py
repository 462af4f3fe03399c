from __future__ import annotations

import asyncio
import logging
import threading
import time
from typing import Optional

from zen.pose.base import KeypointSource
from zen.pose.types import Keypoint, KeypointSet

logger = logging.getLogger(__name__)


COCO17_NAMES = [
	"nose",
	"left_eye",
	"right_eye",
	"left_ear",
	"right_ear",
	"left_shoulder",
	"right_shoulder",
	"left_elbow",
	"right_elbow",
	"left_wrist",
	"right_wrist",
	"left_hip",
	"right_hip",
	"left_knee",
	"right_knee",
	"left_ankle",
	"right_ankle",
]


class MediaPipePoseProvider:
	"""
	MediaPipe Pose provider that outputs a canonical COCO-17-ish keypoint set.

	Notes:
	- MediaPipe uses normalized coordinates; we convert to pixel space.
	- `visibility` is used as score (best-effort).
	"""

	def __init__(
		self,
		model_complexity: int = 1,
		min_detection_confidence: float = 0.5,
		min_tracking_confidence: float = 0.5,
	) -> None:
		try:
			import mediapipe as mp  # type: ignore
		except ImportError as e:
			raise RuntimeError(
				"MediaPipe is not installed. Install pose deps with: pip install -e .[pose]"
			) from e

		self._mp = mp
		self._pose = mp.solutions.pose.Pose(
			static_image_mode=False,
			model_complexity=int(model_complexity),
			enable_segmentation=False,
			smooth_landmarks=True,
			min_detection_confidence=float(min_detection_confidence),
			min_tracking_confidence=float(min_tracking_confidence),
		)

	def name(self) -> str:
		return "mediapipe_pose"

	def infer_rgb(self, rgb, t_host: Optional[float] = None) -> Optional[KeypointSet]:
		# rgb: HxWx3
		h, w = int(rgb.shape[0]), int(rgb.shape[1])
		res = self._pose.process(rgb)
		if not res or not getattr(res, "pose_landmarks", None):
			return None

		lm = res.pose_landmarks.landmark
		PL = self._mp.solutions.pose.PoseLandmark
		keypoints = {}
		for name in COCO17_NAMES:
			idx = getattr(PL, name.upper())
			p = lm[int(idx)]
			keypoints[name] = Keypoint(
				name=name,
				x_px=float(p.x) * float(w),
				y_px=float(p.y) * float(h),
				score=float(getattr(p, "visibility", 0.0) or 0.0),
			)
		return KeypointSet(backend=self.name(), width=w, height=h, t_host=t_host, keypoints=keypoints)

	def close(self) -> None:
		if self._pose is not None:
			self._pose.close()
			self._pose = None


class CameraKeypointSource(KeypointSource):
	"""
	Webcam capture (OpenCV) + MediaPipe pose, exposed as an async keypoint source.

	Capture and inference are blocking, so each read runs in a worker thread.
	A lock keeps reads serialized against close().
	"""

	def __init__(
		self,
		camera_index: int = 0,
		model_complexity: int = 1,
		min_detection_confidence: float = 0.5,
		min_tracking_confidence: float = 0.5,
	) -> None:
		try:
			import cv2  # type: ignore
		except ImportError as e:
			raise RuntimeError(
				"OpenCV is not installed. Install pose deps with: pip install -e .[pose]"
			) from e

		self._cv2 = cv2
		self._provider = MediaPipePoseProvider(
			model_complexity=model_complexity,
			min_detection_confidence=min_detection_confidence,
			min_tracking_confidence=min_tracking_confidence,
		)
		self._cap = cv2.VideoCapture(int(camera_index))
		self._lock = threading.Lock()
		if not self._cap.isOpened():
			logger.warning("[Pose] camera %s could not be opened; no detections will be produced", camera_index)

	def name(self) -> str:
		return f"camera+{self._provider.name()}"

	def _read_blocking(self) -> Optional[KeypointSet]:
		with self._lock:
			if self._cap is None:
				return None
			ok, frame = self._cap.read()
			if not ok or frame is None:
				return None
			rgb = self._cv2.cvtColor(frame, self._cv2.COLOR_BGR2RGB)
			return self._provider.infer_rgb(rgb, t_host=time.time())

	async def read(self) -> Optional[KeypointSet]:
		return await asyncio.to_thread(self._read_blocking)

	def close(self) -> None:
		with self._lock:
			if self._cap is not None:
				self._cap.release()
				self._cap = None
			self._provider.close()
