from __future__ import annotations

import json

import pytest

from utils import app_config


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    path = tmp_path / "config.json"
    monkeypatch.setattr(app_config, "CONFIG_FILE", path)
    return path


def test_missing_config_uses_defaults(config_file) -> None:
    assert app_config.load_config() == {}
    assert app_config.get_db_folder() is None
    assert app_config.get_log_level() == "INFO"


def test_corrupt_config_is_ignored(config_file) -> None:
    config_file.write_text("{not json", encoding="utf-8")
    assert app_config.load_config() == {}


def test_config_values_are_read(config_file, tmp_path) -> None:
    config_file.write_text(
        json.dumps({"db_folder": str(tmp_path), "log_level": "debug"}), encoding="utf-8"
    )
    assert app_config.get_db_folder() == str(tmp_path)
    assert app_config.get_log_level() == "DEBUG"


def test_unknown_log_level_falls_back(config_file) -> None:
    config_file.write_text(json.dumps({"log_level": "chatty"}), encoding="utf-8")
    assert app_config.get_log_level() == "INFO"
