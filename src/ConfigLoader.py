"""Configuration loading for the dictation app.

Configuration lives in a JSON file (``config/dictation_config.json``). Values
present in the file override DEFAULT_CONFIG section by section; missing keys
keep their defaults.
"""
import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict

from src.TranscriptAccumulator import PLACEHOLDER_TEXT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    'engine': {
        'server_url': 'ws://127.0.0.1:8765',
        'handshake_timeout': 10.0,  # seconds to wait for engine_ready
    },
    'listening': {
        'listen_for': 60.0,         # maximum single-session duration, seconds
        'pause_for': 4.0,           # trailing-silence timeout, seconds
        'partial_results': True,
        'cancel_on_error': True,
        'listen_mode': 'dictation',
        'auto_punctuation': True,
    },
    'transcript': {
        'placeholder_text': PLACEHOLDER_TEXT,
    },
    'gui': {
        'title': 'Speech To Text',
        'sound_level_scale': 35.0,
    },
}


def merge_config(overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge overrides over DEFAULT_CONFIG.

    Args:
        overrides: Partial configuration, sections map to dicts

    Returns:
        New configuration dictionary; DEFAULT_CONFIG is not modified
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    for section, values in overrides.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config


def load_config(config_path: str | Path) -> Dict[str, Any]:
    """Load configuration from JSON file.

    Args:
        config_path: Path to dictation_config.json

    Returns:
        Configuration dictionary merged over DEFAULT_CONFIG

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a JSON object
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in config file {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a JSON object")

    logger.info("Loaded configuration from %s", path)
    return merge_config(data)
