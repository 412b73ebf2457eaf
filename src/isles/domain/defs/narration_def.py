"""Narration definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True, frozen=True)
class NarrationDef:
    """Ordered lines shown before exploration begins."""

    id: str
    lines: Tuple[str, ...]
