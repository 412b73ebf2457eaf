"""Factory for creating the player from a hero definition."""
from __future__ import annotations

from isles.data.repositories import HeroRepository
from isles.domain.entities import Player, Stats
from isles.services.errors import FactoryError


def create_player(hero_id: str, heroes_repo: HeroRepository) -> Player:
    """Instantiate a fresh player at full health with no progress."""
    try:
        hero_def = heroes_repo.get(hero_id)
    except KeyError as exc:
        raise FactoryError(f"Hero '{hero_id}' not found.") from exc

    stats = Stats(
        max_hp=hero_def.max_hp,
        hp=hero_def.max_hp,
        attack=hero_def.attack,
        defense=hero_def.defense,
        speed=hero_def.speed,
        luck=hero_def.luck,
    )
    return Player(name=hero_def.name, stats=stats)
