"""Domain definition exports."""

from .enemy_def import EnemyDef
from .hero_def import HeroDef
from .narration_def import NarrationDef

__all__ = [
    "EnemyDef",
    "HeroDef",
    "NarrationDef",
]
