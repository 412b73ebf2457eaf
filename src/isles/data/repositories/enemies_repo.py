"""Enemies repository."""
from __future__ import annotations

from typing import Dict

from isles.data.errors import DataValidationError
from isles.data.repositories.base import RepositoryBase
from isles.domain.defs import EnemyDef

_STAT_FIELDS = ("max_hp", "attack", "defense", "speed", "luck")


class EnemiesRepository(RepositoryBase[EnemyDef]):
    """Loads and validates the enemy template catalog."""

    def __init__(self, base_path=None) -> None:
        super().__init__("enemies.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, EnemyDef]:
        enemies: Dict[str, EnemyDef] = {}
        for raw_id, payload in raw.items():
            context = f"enemy '{raw_id}'"
            enemy_data = self._require_mapping(payload, context)
            self._assert_required(enemy_data, {"name", "stats", "rewards"}, context)
            stats = self._require_mapping(enemy_data["stats"], f"{context} stats")
            self._assert_required(stats, set(_STAT_FIELDS), f"{context} stats")
            rewards = self._require_mapping(enemy_data["rewards"], f"{context} rewards")
            self._assert_required(rewards, {"xp", "gold"}, f"{context} rewards")
            weight = self._require_non_negative_int(enemy_data.get("weight", 1), f"{context} weight")

            max_hp = self._require_non_negative_int(stats["max_hp"], f"{context} max_hp")
            if max_hp == 0:
                raise DataValidationError(f"{context} max_hp must be positive.")
            enemies[raw_id] = EnemyDef(
                id=raw_id,
                name=self._require_str(enemy_data["name"], f"{context} name"),
                max_hp=max_hp,
                attack=self._require_non_negative_int(stats["attack"], f"{context} attack"),
                defense=self._require_non_negative_int(stats["defense"], f"{context} defense"),
                speed=self._require_non_negative_int(stats["speed"], f"{context} speed"),
                luck=self._require_non_negative_int(stats["luck"], f"{context} luck"),
                xp=self._require_non_negative_int(rewards["xp"], f"{context} xp"),
                gold=self._require_non_negative_int(rewards["gold"], f"{context} gold"),
                weight=weight,
            )
        if not any(enemy.weight > 0 for enemy in enemies.values()):
            raise DataValidationError("At least one enemy must have a positive weight.")
        return enemies

    def weighted(self) -> tuple[list[EnemyDef], list[int]]:
        """Return the catalog with its selection weights, skipping zero-weight entries."""
        templates = [enemy for enemy in self.all() if enemy.weight > 0]
        return templates, [enemy.weight for enemy in templates]
