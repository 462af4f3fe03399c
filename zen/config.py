from __future__ import annotations

import json
import os
import socket
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DatabaseConfig:
	# If empty, sample persistence goes to the log only (best-effort mode).
	url: str = ""
	pool_min_size: int = 1
	pool_max_size: int = 4
	# Identifies this machine's samples (the desktop app keyed users by hardware id).
	device_id: str = ""


@dataclass(frozen=True)
class ScoringConfig:
	# .json -> dense network weights, .joblib/.pkl -> persisted estimator.
	model_path: str = str(Path("models") / "model_weights.json")
	# Run predict() in a worker thread instead of on the event loop.
	offload_inference: bool = False


@dataclass(frozen=True)
class SchedulerConfig:
	detection_interval_s: float = 0.1
	sampling_interval_s: float = 5.0
	reminder_interval_s: float = 60.0


@dataclass(frozen=True)
class AlertConfig:
	cooldown_s: float = 60.0


@dataclass(frozen=True)
class FeatureConfig:
	# Keypoints at or below this confidence are treated as absent.
	min_confidence: float = 0.3


@dataclass(frozen=True)
class PoseConfig:
	# Disabled -> NullKeypointSource (no camera, no detections).
	enabled: bool = False
	camera_index: int = 0
	model_complexity: int = 1
	min_detection_confidence: float = 0.5
	min_tracking_confidence: float = 0.5


@dataclass(frozen=True)
class SettingsConfig:
	path: str = str(Path("data") / "settings.json")


@dataclass(frozen=True)
class TraceConfig:
	enabled: bool = False
	min_interval_s: float = 5.0


@dataclass(frozen=True)
class LoggingConfig:
	level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
	database: DatabaseConfig = field(default_factory=DatabaseConfig)
	scoring: ScoringConfig = field(default_factory=ScoringConfig)
	scheduler: SchedulerConfig = field(default_factory=SchedulerConfig)
	alerts: AlertConfig = field(default_factory=AlertConfig)
	features: FeatureConfig = field(default_factory=FeatureConfig)
	pose: PoseConfig = field(default_factory=PoseConfig)
	settings: SettingsConfig = field(default_factory=SettingsConfig)
	trace: TraceConfig = field(default_factory=TraceConfig)
	logging: LoggingConfig = field(default_factory=LoggingConfig)


_CONFIG_PATH: Optional[Path] = None
_CONFIG_CACHE: Optional[AppConfig] = None


def _repo_root() -> Path:
	# zen/config.py -> repo root is one level up.
	return Path(__file__).resolve().parents[1]


def get_default_config_path() -> Path:
	env = os.environ.get("ZEN_CONFIG")
	if env:
		return Path(env).expanduser().resolve()
	return _repo_root() / "config.json"


def set_config_path(path: str | Path) -> None:
	"""
	Override the config path and drop the cached config.
	Intended for tooling and tests; the server normally uses the default path.
	"""
	global _CONFIG_PATH
	global _CONFIG_CACHE
	_CONFIG_PATH = Path(path).expanduser().resolve()
	_CONFIG_CACHE = None


def _deep_get(d: Dict[str, Any], keys: list[str], default: Any = None) -> Any:
	cur: Any = d
	for k in keys:
		if not isinstance(cur, dict):
			return default
		cur = cur.get(k)
	return cur if cur is not None else default


def _as_int(v: Any, default: int) -> int:
	try:
		return int(v)
	except (TypeError, ValueError):
		return int(default)


def _as_bool(v: Any, default: bool) -> bool:
	if isinstance(v, bool):
		return v
	if isinstance(v, (int, float)):
		return bool(v)
	if isinstance(v, str):
		return v.strip().lower() in ("1", "true", "yes", "on")
	return bool(default)


def _as_str(v: Any, default: str = "") -> str:
	return str(v) if v is not None else str(default)


def _as_float(v: Any, default: float) -> float:
	try:
		return float(v)
	except (TypeError, ValueError):
		return float(default)


def _positive(v: float, default: float) -> float:
	return float(v) if float(v) > 0.0 else float(default)


def load_config(path: Optional[str | Path] = None) -> AppConfig:
	p = Path(path).expanduser().resolve() if path else (_CONFIG_PATH or get_default_config_path())
	if not p.exists():
		# Defaults-only config; app can still run.
		return AppConfig()
	try:
		raw = json.loads(p.read_text(encoding="utf-8"))
	except (OSError, ValueError):
		# If config is malformed, fail safe to defaults (but keep app running).
		return AppConfig()

	if not isinstance(raw, dict):
		return AppConfig()

	defaults = AppConfig()

	db_url = _as_str(_deep_get(raw, ["database", "url"], ""), "")
	db_min = max(1, _as_int(_deep_get(raw, ["database", "pool_min_size"], 1), 1))
	db_max = max(db_min, _as_int(_deep_get(raw, ["database", "pool_max_size"], 4), 4))
	device_id = _as_str(_deep_get(raw, ["database", "device_id"], ""), "").strip() or socket.gethostname()

	model_path = _as_str(_deep_get(raw, ["scoring", "model_path"], defaults.scoring.model_path), defaults.scoring.model_path)
	offload = _as_bool(_deep_get(raw, ["scoring", "offload_inference"], False), False)

	sch = defaults.scheduler
	det_s = _positive(_as_float(_deep_get(raw, ["scheduler", "detection_interval_s"], sch.detection_interval_s), sch.detection_interval_s), sch.detection_interval_s)
	smp_s = _positive(_as_float(_deep_get(raw, ["scheduler", "sampling_interval_s"], sch.sampling_interval_s), sch.sampling_interval_s), sch.sampling_interval_s)
	rem_s = _positive(_as_float(_deep_get(raw, ["scheduler", "reminder_interval_s"], sch.reminder_interval_s), sch.reminder_interval_s), sch.reminder_interval_s)

	cooldown_s = _as_float(_deep_get(raw, ["alerts", "cooldown_s"], 60.0), 60.0)
	cooldown_s = max(0.0, cooldown_s)

	min_conf = _as_float(_deep_get(raw, ["features", "min_confidence"], 0.3), 0.3)
	min_conf = min(1.0, max(0.0, min_conf))

	pose_enabled = _as_bool(_deep_get(raw, ["pose", "enabled"], False), False)
	camera_index = _as_int(_deep_get(raw, ["pose", "camera_index"], 0), 0)
	complexity = _as_int(_deep_get(raw, ["pose", "model_complexity"], 1), 1)
	det_conf = _as_float(_deep_get(raw, ["pose", "min_detection_confidence"], 0.5), 0.5)
	trk_conf = _as_float(_deep_get(raw, ["pose", "min_tracking_confidence"], 0.5), 0.5)

	settings_path = _as_str(_deep_get(raw, ["settings", "path"], defaults.settings.path), defaults.settings.path).strip()

	trace_enabled = _as_bool(_deep_get(raw, ["trace", "enabled"], False), False)
	trace_interval = _positive(_as_float(_deep_get(raw, ["trace", "min_interval_s"], 5.0), 5.0), 5.0)

	log_level = _as_str(_deep_get(raw, ["logging", "level"], "INFO"), "INFO").strip().upper() or "INFO"

	return AppConfig(
		database=DatabaseConfig(url=db_url, pool_min_size=db_min, pool_max_size=db_max, device_id=device_id),
		scoring=ScoringConfig(model_path=model_path, offload_inference=offload),
		scheduler=SchedulerConfig(
			detection_interval_s=det_s,
			sampling_interval_s=smp_s,
			reminder_interval_s=rem_s,
		),
		alerts=AlertConfig(cooldown_s=cooldown_s),
		features=FeatureConfig(min_confidence=min_conf),
		pose=PoseConfig(
			enabled=pose_enabled,
			camera_index=camera_index,
			model_complexity=complexity,
			min_detection_confidence=det_conf,
			min_tracking_confidence=trk_conf,
		),
		settings=SettingsConfig(path=settings_path or defaults.settings.path),
		trace=TraceConfig(enabled=trace_enabled, min_interval_s=trace_interval),
		logging=LoggingConfig(level=log_level),
	)


def get_config() -> AppConfig:
	global _CONFIG_CACHE
	if _CONFIG_CACHE is None:
		_CONFIG_CACHE = load_config()
	return _CONFIG_CACHE


def resolve_path(path: str | Path) -> Path:
	"""Resolve a config-relative path against the repo root."""
	p = Path(path).expanduser()
	return p if p.is_absolute() else _repo_root() / p
