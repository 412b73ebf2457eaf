"""CLI options read from the per-user config file."""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict

from isles.services.encounter_service import clamp_multiplier

logger = logging.getLogger(__name__)

_DEFAULT_TEXT_MODE = "instant"
_DEFAULT_ENCOUNTER_MULTIPLIER = 1.0


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "EmeraldIsles"
        return Path.home() / "EmeraldIsles"
    return Path.home() / ".config" / "emerald_isles"


def get_default_config_path() -> Path:
    return get_user_data_dir() / "config.json"


def _normalize_text_mode(value: object) -> str:
    return "step" if value == "step" else _DEFAULT_TEXT_MODE


def _normalize_multiplier(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return _DEFAULT_ENCOUNTER_MULTIPLIER
    return clamp_multiplier(value)


def _defaults() -> Dict[str, object]:
    return {
        "text_display_mode": _DEFAULT_TEXT_MODE,
        "encounter_multiplier": _DEFAULT_ENCOUNTER_MULTIPLIER,
    }


def load_config(path: Path | None = None) -> Dict[str, object]:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return _defaults()
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config_path, exc)
        return _defaults()
    if not isinstance(raw, dict):
        return _defaults()
    return {
        "text_display_mode": _normalize_text_mode(raw.get("text_display_mode")),
        "encounter_multiplier": _normalize_multiplier(raw.get("encounter_multiplier")),
    }

