"""Tests for loading config.json and merging user overrides."""
import json
import logging

from retouch_studio.config_manager import OVERRIDE_ENV, load_config


def write(path, payload):
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


def test_packaged_defaults(monkeypatch):
    monkeypatch.delenv(OVERRIDE_ENV, raising=False)
    config = load_config()
    assert config["app_settings"]["history_limit"] == 50
    assert config["theme"]["marquee_color"] == "#ffffff"


def test_override_merges_nested(tmp_path):
    path = write(tmp_path / "user.json", {"app_settings": {"history_limit": 5}})
    config = load_config(path)
    assert config["app_settings"]["history_limit"] == 5
    assert config["app_settings"]["title"] == "Retouch Studio"


def test_override_from_environment(tmp_path, monkeypatch):
    path = write(tmp_path / "user.json", {"theme": {"canvas_bg": "#000000"}})
    monkeypatch.setenv(OVERRIDE_ENV, str(path))
    assert load_config()["theme"]["canvas_bg"] == "#000000"


def test_broken_override_ignored(tmp_path, caplog):
    path = write(tmp_path / "user.json", "{not json")
    with caplog.at_level(logging.ERROR):
        config = load_config(path)
    assert config["app_settings"]["history_limit"] == 50
    assert "not valid JSON" in caplog.text


def test_missing_and_non_object_overrides(tmp_path):
    assert load_config(tmp_path / "absent.json")["app_settings"]["fill_tolerance"] == 32
    path = write(tmp_path / "list.json", [1, 2, 3])
    assert load_config(path)["app_settings"]["fill_tolerance"] == 32
