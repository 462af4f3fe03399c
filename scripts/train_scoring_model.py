#!/usr/bin/env python3
"""
Train the posture scoring network from labelled feature rows.

Input CSV columns: the 7 feature names (see zen.pose.features.FEATURE_NAMES) plus
`label` (1 = good posture, 0 = bad posture). Writes a joblib model and/or the JSON
dense weights loaded by DenseScoringModel.

	python scripts/train_scoring_model.py data/features.csv --json models/model_weights.json
"""
from __future__ import annotations

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import joblib
import numpy as np

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from zen.pose.features import FEATURE_NAMES  # noqa: E402
from zen.scoring.trained import DenseScoringModel  # noqa: E402

logger = logging.getLogger("train_scoring_model")

HIDDEN_LAYERS = (16, 16)


def load_rows(path: str | Path) -> Tuple[np.ndarray, np.ndarray]:
	features = []
	labels = []
	with open(path, "r", encoding="utf-8", newline="") as f:
		reader = csv.DictReader(f)
		missing = [c for c in (*FEATURE_NAMES, "label") if c not in (reader.fieldnames or [])]
		if missing:
			raise ValueError(f"CSV is missing columns: {', '.join(missing)}")
		for row in reader:
			features.append([float(row[name]) for name in FEATURE_NAMES])
			labels.append(int(float(row["label"])))
	x = np.asarray(features, dtype=np.float64).reshape(-1, len(FEATURE_NAMES))
	y = np.asarray(labels, dtype=np.int64)
	if len(set(y.tolist())) != 2:
		raise ValueError("training data needs both good (1) and bad (0) examples")
	return x, y


def train(x: np.ndarray, y: np.ndarray, max_iter: int = 2000, random_state: int = 42):
	from sklearn.neural_network import MLPClassifier

	clf = MLPClassifier(
		hidden_layer_sizes=HIDDEN_LAYERS,
		activation="relu",
		max_iter=int(max_iter),
		random_state=int(random_state),
	)
	clf.fit(x, y)
	return clf


def to_dense_model(clf) -> DenseScoringModel:
	"""Export a fitted binary MLPClassifier (logistic output) as dense weights."""
	if list(clf.classes_) != [0, 1]:
		raise ValueError(f"expected classes [0, 1], got {list(clf.classes_)}")
	arrays = []
	for kernel, bias in zip(clf.coefs_, clf.intercepts_):
		arrays.append(kernel.tolist())
		arrays.append(bias.tolist())
	return DenseScoringModel.from_arrays(arrays, source="MLPClassifier")


def main(argv: Optional[list] = None) -> int:
	parser = argparse.ArgumentParser(description="Train the posture scoring model.")
	parser.add_argument("csv", help="Labelled feature rows")
	parser.add_argument("--joblib", dest="joblib_path", default=None, help="Write the fitted estimator here")
	parser.add_argument("--json", dest="json_path", default=None, help="Write dense JSON weights here")
	parser.add_argument("--max-iter", type=int, default=2000)
	parser.add_argument("--seed", type=int, default=42)
	args = parser.parse_args(argv)

	logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
	if not args.joblib_path and not args.json_path:
		parser.error("nothing to write: pass --joblib and/or --json")

	x, y = load_rows(args.csv)
	clf = train(x, y, max_iter=args.max_iter, random_state=args.seed)
	logger.info("trained on %d rows, training accuracy %.3f", len(y), float(clf.score(x, y)))

	if args.joblib_path:
		Path(args.joblib_path).parent.mkdir(parents=True, exist_ok=True)
		joblib.dump(clf, args.joblib_path)
		logger.info("wrote estimator to %s", args.joblib_path)
	if args.json_path:
		Path(args.json_path).parent.mkdir(parents=True, exist_ok=True)
		to_dense_model(clf).save_json(args.json_path)
		logger.info("wrote dense weights to %s", args.json_path)
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
