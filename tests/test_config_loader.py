"""Tests for ConfigLoader - JSON configuration merged over defaults."""

import json
from pathlib import Path

import pytest

from src.ConfigLoader import DEFAULT_CONFIG, load_config, merge_config

PROJECT_CONFIG = Path(__file__).resolve().parent.parent / "config" / "dictation_config.json"


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.json")


def test_invalid_json_raises_value_error(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{ not json", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid JSON"):
        load_config(path)


def test_non_object_raises_value_error(tmp_path):
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")

    with pytest.raises(ValueError):
        load_config(path)


def test_partial_config_keeps_defaults(tmp_path):
    path = tmp_path / "partial.json"
    path.write_text(json.dumps({"listening": {"pause_for": 2.0}}), encoding="utf-8")

    config = load_config(path)

    assert config["listening"]["pause_for"] == 2.0
    assert config["listening"]["listen_for"] == DEFAULT_CONFIG["listening"]["listen_for"]
    assert config["engine"]["server_url"] == DEFAULT_CONFIG["engine"]["server_url"]


def test_merge_does_not_modify_defaults():
    merge_config({"engine": {"server_url": "ws://example:1"}})

    assert DEFAULT_CONFIG["engine"]["server_url"] == "ws://127.0.0.1:8765"


def test_shipped_config_matches_defaults():
    config = load_config(PROJECT_CONFIG)

    assert config == DEFAULT_CONFIG
