"""Factory for creating enemy instances from templates."""
from __future__ import annotations

from isles.core.rng import RNG
from isles.domain.defs import EnemyDef
from isles.domain.entities import EnemyInstance, Stats

from .id_factory import make_instance_id


def create_enemy_instance(enemy_def: EnemyDef, rng: RNG) -> EnemyInstance:
    """Clone a template's stats into a fresh instance at full health."""
    stats = Stats(
        max_hp=enemy_def.max_hp,
        hp=enemy_def.max_hp,
        attack=enemy_def.attack,
        defense=enemy_def.defense,
        speed=enemy_def.speed,
        luck=enemy_def.luck,
    )
    return EnemyInstance(
        id=make_instance_id("enemy", rng),
        enemy_id=enemy_def.id,
        name=enemy_def.name,
        stats=stats,
        xp_reward=enemy_def.xp,
        gold_reward=enemy_def.gold,
    )
