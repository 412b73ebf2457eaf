"""Player runtime model."""
from __future__ import annotations

from dataclasses import dataclass

from .stats import Stats


@dataclass(slots=True)
class Player:
    """Represents the adventurer and their session progress."""

    name: str
    stats: Stats
    xp: int = 0
    gold: int = 0
