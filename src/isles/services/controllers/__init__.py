"""UI-agnostic controllers for session flow orchestration."""
from __future__ import annotations

from .combat_controller import CombatAction, CombatController, CombatView
from .session_controller import CommandResult, SessionController, SessionSettings

__all__ = [
    "CombatAction",
    "CombatController",
    "CombatView",
    "CommandResult",
    "SessionController",
    "SessionSettings",
]
