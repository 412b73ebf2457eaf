"""Repository exports."""

from .enemies_repo import EnemiesRepository
from .hero_repo import DEFAULT_HERO_ID, HeroRepository
from .narration_repo import INTRO_NARRATION_ID, NarrationRepository

__all__ = [
    "DEFAULT_HERO_ID",
    "EnemiesRepository",
    "HeroRepository",
    "INTRO_NARRATION_ID",
    "NarrationRepository",
]
