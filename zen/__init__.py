"""
Zen posture core package.

Real-time posture scoring pipeline: keypoint features, scoring models,
temporal smoothing, alert policy and the periodic scheduler that ties them together.
"""

from pathlib import Path


def _read_version() -> str:
	try:
		vf = Path(__file__).resolve().parents[1] / "VERSION"
		if vf.exists():
			val = vf.read_text(encoding="utf-8").strip()
			if val:
				return val
	except OSError:
		pass
	return "0.3.0"


__version__ = _read_version()
