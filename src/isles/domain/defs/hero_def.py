"""Starting hero definition."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class HeroDef:
    """Base stats the adventurer starts (and restarts) with."""

    name: str
    max_hp: int
    attack: int
    defense: int
    speed: int
    luck: int
