import json
import logging

import numpy as np
import pytest

from zen.errors import ModelUnavailable
from zen.scoring import HeuristicScoringModel, load_trained_model, select_scoring_model


def _write_weights(path, arrays):
	path.write_text(json.dumps(arrays), encoding="utf-8")
	return path


def _valid_arrays():
	return [np.zeros((7, 16)).tolist(), [0.0] * 16, np.zeros((16, 16)).tolist(), [0.0] * 16, np.zeros((16, 1)).tolist(), [0.5]]


def test_valid_weights_select_trained_model(tmp_path):
	path = _write_weights(tmp_path / "model_weights.json", _valid_arrays())
	selection = select_scoring_model(path)
	assert selection.degraded is False
	assert selection.reason is None
	assert selection.model.is_trained
	assert selection.model.name() == "trained_model"


def test_missing_file_falls_back(tmp_path, caplog):
	with caplog.at_level(logging.INFO, logger="zen.scoring"):
		selection = select_scoring_model(tmp_path / "nope.json")
	assert selection.degraded is True
	assert isinstance(selection.model, HeuristicScoringModel)
	assert "not found" in selection.reason
	assert "degraded" in caplog.text
	# Reference postures are logged once at fallback time.
	assert "excellent" in caplog.text


@pytest.mark.parametrize("content", ["{broken", "{}", json.dumps([[1.0], [2.0], [3.0]])])
def test_malformed_weights_fall_back(tmp_path, content):
	path = tmp_path / "model_weights.json"
	path.write_text(content, encoding="utf-8")
	selection = select_scoring_model(path)
	assert selection.degraded is True
	assert selection.model.is_trained is False


def test_unsupported_format_falls_back(tmp_path):
	path = tmp_path / "model.onnx"
	path.write_bytes(b"\x00")
	selection = select_scoring_model(path)
	assert selection.degraded is True
	assert "unsupported" in selection.reason


def test_no_path_falls_back():
	selection = select_scoring_model(None)
	assert selection.degraded is True


def test_load_trained_model_raises(tmp_path):
	with pytest.raises(ModelUnavailable):
		load_trained_model(tmp_path / "nope.json")
	with pytest.raises(ModelUnavailable):
		load_trained_model("")
