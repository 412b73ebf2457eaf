"""Domain-level session state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from isles.core.rng import RNG
from isles.core.types import Position, SessionMode
from isles.domain.combat_models import CombatState
from isles.domain.entities import Player
from isles.domain.terrain import World


@dataclass
class SessionState:
    """Everything one play session owns; passed explicitly to every operation."""

    seed: int | None
    rng: RNG
    mode: SessionMode
    player: Player
    world: World
    position: Position
    narration_index: int = 0
    combat: CombatState | None = None
    combat_log: List[str] = field(default_factory=list)
    encounter_multiplier: float = 1.0
    debug_visible: bool = False
    completed: bool = False
    restarts: int = 0
