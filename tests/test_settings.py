import json

import pytest

from zen import settings as settings_module
from zen.settings import KEY_NOTIFICATIONS, KEY_THRESHOLD, SettingsStore, ThresholdConfig, clamp_threshold


def test_defaults():
	assert SettingsStore(None).threshold_config() == ThresholdConfig(value=70, notifications_enabled=True)


def test_update_persists(tmp_path):
	path = tmp_path / "data" / "settings.json"
	store = SettingsStore(path)
	cfg = store.update_threshold_config(value=55)
	assert cfg == ThresholdConfig(value=55, notifications_enabled=True)

	on_disk = json.loads(path.read_text(encoding="utf-8"))
	assert on_disk[KEY_THRESHOLD] == 55

	store.update_threshold_config(notifications_enabled=False)
	reopened = SettingsStore(path)
	assert reopened.threshold_config() == ThresholdConfig(value=55, notifications_enabled=False)
	assert reopened.get(KEY_NOTIFICATIONS) is False


def test_unreadable_file_uses_defaults(tmp_path):
	path = tmp_path / "settings.json"
	path.write_text("not json", encoding="utf-8")
	assert SettingsStore(path).threshold_config().value == 70


def test_stored_values_are_sanitized(tmp_path):
	path = tmp_path / "settings.json"
	path.write_text(json.dumps({KEY_THRESHOLD: "250", KEY_NOTIFICATIONS: 0}), encoding="utf-8")
	cfg = SettingsStore(path).threshold_config()
	assert cfg.value == 100
	assert cfg.notifications_enabled is False


def test_clamp_threshold():
	assert clamp_threshold(-5) == 0
	assert clamp_threshold(101) == 100
	assert clamp_threshold("x") == 70


def test_generic_keys(tmp_path):
	store = SettingsStore(tmp_path / "settings.json")
	assert store.get("theme", "light") == "light"
	store.set("theme", "dark")
	assert SettingsStore(tmp_path / "settings.json").get("theme") == "dark"


def test_failed_write_leaves_settings_unchanged(tmp_path, monkeypatch):
	path = tmp_path / "settings.json"
	store = SettingsStore(path)
	store.update_threshold_config(value=60)

	def broken_replace(src, dst):
		raise OSError("disk full")

	monkeypatch.setattr(settings_module.os, "replace", broken_replace)
	with pytest.raises(OSError):
		store.update_threshold_config(value=20, notifications_enabled=False)
	with pytest.raises(OSError):
		store.set(KEY_THRESHOLD, 5)
	assert store.threshold_config() == ThresholdConfig(value=60, notifications_enabled=True)
	assert json.loads(path.read_text(encoding="utf-8"))[KEY_THRESHOLD] == 60


def test_hand_edited_boolean_strings(tmp_path):
	path = tmp_path / "settings.json"
	path.write_text(json.dumps({KEY_NOTIFICATIONS: "false"}), encoding="utf-8")
	assert SettingsStore(path).threshold_config().notifications_enabled is False
	path.write_text(json.dumps({KEY_NOTIFICATIONS: "true"}), encoding="utf-8")
	assert SettingsStore(path).threshold_config().notifications_enabled is True
