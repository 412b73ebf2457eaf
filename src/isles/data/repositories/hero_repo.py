"""Hero repository."""
from __future__ import annotations

from typing import Dict

from isles.data.errors import DataValidationError
from isles.data.repositories.base import RepositoryBase
from isles.domain.defs import HeroDef

DEFAULT_HERO_ID = "adventurer"


class HeroRepository(RepositoryBase[HeroDef]):
    """Loads the starting stats of playable heroes."""

    def __init__(self, base_path=None) -> None:
        super().__init__("hero.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, HeroDef]:
        heroes: Dict[str, HeroDef] = {}
        for hero_id, payload in raw.items():
            context = f"hero '{hero_id}'"
            data = self._require_mapping(payload, context)
            self._assert_required(data, {"name", "max_hp", "attack", "defense", "speed", "luck"}, context)
            max_hp = self._require_non_negative_int(data["max_hp"], f"{context} max_hp")
            if max_hp == 0:
                raise DataValidationError(f"{context} max_hp must be positive.")
            heroes[hero_id] = HeroDef(
                name=self._require_str(data["name"], f"{context} name"),
                max_hp=max_hp,
                attack=self._require_non_negative_int(data["attack"], f"{context} attack"),
                defense=self._require_non_negative_int(data["defense"], f"{context} defense"),
                speed=self._require_non_negative_int(data["speed"], f"{context} speed"),
                luck=self._require_non_negative_int(data["luck"], f"{context} luck"),
            )
        return heroes
