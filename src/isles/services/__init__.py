"""Service layer exports."""

from .errors import CombatContractError, ConfigurationError, FactoryError
from .combat_service import CombatService, RoundResult
from .narration_service import NarrationService, NarrationView
from .terrain_service import generate_world, generate_world_from_seed

__all__ = [
    "CombatContractError",
    "ConfigurationError",
    "FactoryError",
    "CombatService",
    "RoundResult",
    "NarrationService",
    "NarrationView",
    "generate_world",
    "generate_world_from_seed",
]
