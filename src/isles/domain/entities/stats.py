"""Stat models for runtime entities."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Stats:
    """Stores basic combat stats."""

    max_hp: int
    hp: int
    attack: int
    defense: int
    speed: int
    luck: int

    @property
    def is_alive(self) -> bool:
        return self.hp > 0
