"""Enemy definition structures."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class EnemyDef:
    """Immutable enemy template cloned into a fresh instance per encounter."""

    id: str
    name: str
    max_hp: int
    attack: int
    defense: int
    speed: int
    luck: int
    xp: int
    gold: int
    weight: int = 1
