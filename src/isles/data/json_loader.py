"""Low-level JSON helpers for repositories."""
from __future__ import annotations

import json
import logging
from pathlib import Path

from .errors import DataLoadError

logger = logging.getLogger(__name__)


def load_json(path: Path) -> object:
    """Read and decode one definition file."""
    logger.debug("Loading definitions from %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DataLoadError(f"Definition file not found: {path}", path) from exc
    except OSError as exc:
        raise DataLoadError(f"Unable to read definition file: {path}", path) from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {path} (line {exc.lineno}): {exc.msg}", path) from exc
