"""Per-tile random encounter model."""
from __future__ import annotations

import logging
from typing import Dict, Sequence

from isles.core.rng import RNG
from isles.core.types import Position
from isles.domain.defs import EnemyDef
from isles.domain.terrain import Grid, TileKind

logger = logging.getLogger(__name__)

BASE_ENCOUNTER_CHANCES: Dict[TileKind, float] = {
    TileKind.FOREST: 0.18,
    TileKind.LAND: 0.08,
}
MAX_ENCOUNTER_MULTIPLIER = 10.0


def encounter_chance(tile: TileKind, multiplier: float = 1.0) -> float:
    """Return the probability that stepping onto ``tile`` starts a fight."""
    base = BASE_ENCOUNTER_CHANCES.get(tile, 0.0)
    return max(0.0, min(1.0, base * multiplier))


def tile_encounter_chance(grid: Grid, pos: Position, multiplier: float = 1.0) -> float:
    x, y = pos
    if not grid.in_bounds(x, y):
        return 0.0
    return encounter_chance(grid.get(x, y), multiplier)


def roll_encounter(grid: Grid, pos: Position, rng: RNG, multiplier: float = 1.0) -> bool:
    """Draw once against the destination tile's encounter chance."""
    chance = tile_encounter_chance(grid, pos, multiplier)
    if chance <= 0.0:
        return False
    draw = rng.random()
    triggered = draw < chance
    logger.debug("Encounter roll at %s: chance=%.3f draw=%.3f triggered=%s", pos, chance, draw, triggered)
    return triggered


def choose_enemy(templates: Sequence[EnemyDef], rng: RNG) -> EnemyDef:
    """Pick a template from the catalog using each entry's weight."""
    return rng.weighted_choice(templates, [template.weight for template in templates])


def clamp_multiplier(value: float) -> float:
    return max(0.0, min(MAX_ENCOUNTER_MULTIPLIER, float(value)))
