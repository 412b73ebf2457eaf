"""Combat domain models."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from isles.domain.defs import EnemyDef
from isles.domain.entities import EnemyInstance, Stats

Side = Literal["player", "enemy"]
CombatPhase = Literal["idle", "in_progress", "won", "lost", "fled"]
CombatActionType = Literal["attack", "run"]

TERMINAL_PHASES: frozenset[str] = frozenset({"won", "lost", "fled"})


@dataclass(slots=True)
class Combatant:
    """Represents an individual participant in combat."""

    display_name: str
    side: Side
    stats: Stats

    @property
    def is_alive(self) -> bool:
        return self.stats.hp > 0


@dataclass(slots=True)
class CombatState:
    """Tracks the state of one encounter from begin to its terminal outcome."""

    player: Combatant
    enemy: Combatant
    enemy_instance: EnemyInstance
    template: EnemyDef
    phase: CombatPhase = "in_progress"
    turn: int = 0
    rewards_applied: bool = False

    @property
    def is_over(self) -> bool:
        return self.phase in TERMINAL_PHASES


@dataclass(slots=True, frozen=True)
class Rewards:
    xp: int
    gold: int
