import json

import pytest
from fastapi.testclient import TestClient

from zen import config


@pytest.fixture
def client(tmp_path, monkeypatch):
	cfg_path = tmp_path / "config.json"
	cfg_path.write_text(
		json.dumps(
			{
				"database": {"url": ""},
				"scoring": {"model_path": str(tmp_path / "missing_weights.json")},
				"settings": {"path": str(tmp_path / "settings.json")},
				"pose": {"enabled": False},
			}
		),
		encoding="utf-8",
	)
	monkeypatch.setattr(config, "_CONFIG_PATH", None)
	monkeypatch.setattr(config, "_CONFIG_CACHE", None)
	config.set_config_path(cfg_path)

	from server import app

	with TestClient(app) as c:
		yield c


def test_index(client):
	r = client.get("/")
	assert r.status_code == 200
	assert r.json()["service"] == "zen-posture"


def test_score_before_first_detection(client):
	r = client.get("/api/score")
	assert r.status_code == 200
	body = r.json()
	assert body["smoothed_score"] is None
	assert body["raw_score"] is None
	# No weights file -> heuristic fallback.
	assert body["degraded"] is True


def test_status(client):
	r = client.get("/api/status")
	assert r.status_code == 200
	body = r.json()
	assert body["scheduler"]["running"] is True
	assert body["scheduler"]["model"] == "fallback_heuristic_model"
	assert body["scheduler"]["source"] == "null"
	assert body["db"]["enabled"] is False
	assert body["ws_clients"] == 0


def test_settings_roundtrip(client, tmp_path):
	r = client.get("/api/settings")
	assert r.json() == {"threshold": 70, "notifications_enabled": True}

	r = client.put("/api/settings", json={"threshold": 55})
	assert r.status_code == 200
	assert r.json() == {"threshold": 55, "notifications_enabled": True}

	r = client.put("/api/settings", json={"notifications_enabled": False})
	assert r.json() == {"threshold": 55, "notifications_enabled": False}

	saved = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))
	assert saved == {"notificationsEnabled": False, "postureThreshold": 55}


@pytest.mark.parametrize("payload", [{"threshold": 101}, {"threshold": -1}, {"threshold": "high"}])
def test_settings_rejects_bad_threshold(client, payload):
	r = client.put("/api/settings", json=payload)
	assert r.status_code == 422


def test_websocket_sends_score_snapshot(client):
	with client.websocket_connect("/ws") as ws:
		msg = ws.receive_json()
	assert msg["type"] == "score"
	assert msg["smoothed_score"] is None
