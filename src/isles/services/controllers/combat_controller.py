"""UI-agnostic combat controller that separates state progression from rendering."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from isles.domain.combat_models import CombatActionType, CombatPhase, CombatState
from isles.domain.defs import EnemyDef
from isles.domain.state import SessionState
from isles.services.combat_service import CombatService, RoundResult


@dataclass(slots=True)
class CombatAction:
    """Represents a structured action decision from the player."""

    action_type: CombatActionType


@dataclass(slots=True)
class CombatView:
    """Presentation view for the current encounter."""

    enemy_name: str
    enemy_hp: int
    enemy_max_hp: int
    player_hp: int
    player_max_hp: int
    turn: int
    phase: CombatPhase
    awaiting_acknowledgement: bool


class CombatController:
    """
    UI-agnostic controller for encounter progression.

    This controller wraps CombatService and exposes only structured state and actions.
    It does NOT handle rendering, text reveal timing, or input prompts.
    """

    def __init__(self, combat_service: CombatService) -> None:
        self._service = combat_service

    def start(self, state: SessionState, template: EnemyDef) -> tuple[CombatState, List[str]]:
        """Open an encounter against ``template`` using the session's RNG."""
        return self._service.begin(state.player, template, state.rng, active=state.combat)

    def get_combat_view(self, combat: CombatState) -> CombatView:
        """Return structured view of the encounter for rendering."""
        return CombatView(
            enemy_name=combat.enemy.display_name,
            enemy_hp=combat.enemy.stats.hp,
            enemy_max_hp=combat.enemy.stats.max_hp,
            player_hp=combat.player.stats.hp,
            player_max_hp=combat.player.stats.max_hp,
            turn=combat.turn,
            phase=combat.phase,
            awaiting_acknowledgement=combat.is_over,
        )

    def get_available_actions(self, state: SessionState) -> dict:
        """
        Return which actions the player may take right now.

        Returns a dict with:
        - can_attack: bool
        - can_run: bool
        - can_acknowledge: bool
        """
        combat = state.combat
        in_progress = combat is not None and combat.phase == "in_progress"
        return {
            "can_attack": in_progress,
            "can_run": in_progress,
            "can_acknowledge": combat is not None and combat.is_over,
        }

    def apply_player_action(self, state: SessionState, action: CombatAction) -> RoundResult:
        """
        Apply a player action and return the round result.

        This method does NOT print or format anything. It only executes game logic.
        """
        if state.combat is None:
            raise ValueError("No encounter is active.")
        return self._service.resolve_round(state.combat, state.player, action.action_type, state.rng)

    def force_outcome(self, state: SessionState, outcome: CombatPhase) -> RoundResult:
        if state.combat is None:
            raise ValueError("No encounter is active.")
        return self._service.force_outcome(state.combat, state.player, outcome)
