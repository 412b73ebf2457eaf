"""Session controller driving narration, exploration and combat."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from isles.core.rng import RNG
from isles.core.types import DIRECTION_DELTAS, SESSION_MODES, Direction, Position, SessionMode
from isles.data.repositories import DEFAULT_HERO_ID, EnemiesRepository, HeroRepository
from isles.domain.combat_models import CombatPhase
from isles.domain.state import SessionState
from isles.domain.terrain import TileKind
from isles.services.combat_service import RoundResult
from isles.services.controllers.combat_controller import CombatAction, CombatController, CombatView
from isles.services.encounter_service import choose_enemy, clamp_multiplier, roll_encounter
from isles.services.errors import CombatContractError
from isles.services.factories import create_player
from isles.services.narration_service import NarrationService
from isles.services.terrain_service import generate_world

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SessionSettings:
    """Fixed parameters for every world a controller generates."""

    width: int = 32
    height: int = 20
    hero_id: str = DEFAULT_HERO_ID
    encounter_multiplier: float = 1.0


@dataclass(slots=True)
class SessionEvent:
    """Base class for display events emitted by session commands."""


@dataclass(slots=True)
class NarrationLineEvent(SessionEvent):
    index: int
    total: int
    text: str


@dataclass(slots=True)
class ExplorationStartedEvent(SessionEvent):
    position: Position


@dataclass(slots=True)
class PlayerMovedEvent(SessionEvent):
    from_position: Position
    to_position: Position
    tile: TileKind


@dataclass(slots=True)
class EncounterStartedEvent(SessionEvent):
    enemy_id: str
    enemy_name: str
    lines: List[str]


@dataclass(slots=True)
class CombatRoundEvent(SessionEvent):
    outcome: CombatPhase
    lines: List[str]
    player_hp: int
    enemy_hp: int


@dataclass(slots=True)
class CombatEndedEvent(SessionEvent):
    outcome: CombatPhase


@dataclass(slots=True)
class SessionCompletedEvent(SessionEvent):
    xp: int
    gold: int


@dataclass(slots=True)
class SessionRestartedEvent(SessionEvent):
    reason: str


@dataclass(slots=True)
class DebugToggledEvent(SessionEvent):
    visible: bool


@dataclass(slots=True)
class DebugOverrideEvent(SessionEvent):
    field: str
    value: object


@dataclass(slots=True)
class CommandResult:
    """Outcome of one command; rejected commands leave the state untouched."""

    accepted: bool
    events: List[SessionEvent] = field(default_factory=list)


def _rejected() -> CommandResult:
    return CommandResult(accepted=False)


class SessionController:
    """Owns the mode machine and applies one command at a time to a session."""

    def __init__(
        self,
        narration_service: NarrationService,
        combat_controller: CombatController,
        enemies_repo: EnemiesRepository,
        heroes_repo: HeroRepository,
        *,
        settings: SessionSettings | None = None,
    ) -> None:
        self._narration = narration_service
        self._combat = combat_controller
        self._enemies_repo = enemies_repo
        self._heroes_repo = heroes_repo
        self._settings = settings or SessionSettings()

    # -----------------------
    # Session lifecycle
    # -----------------------
    def new_session(self, seed: int | None = None) -> SessionState:
        """Create a fresh session positioned at the first narration line."""
        rng = RNG(seed)
        world = generate_world(self._settings.width, self._settings.height, rng)
        player = create_player(self._settings.hero_id, self._heroes_repo)
        logger.info("New session (seed=%s), spawn=%s goal=%s", seed, world.spawn, world.goal)
        return SessionState(
            seed=seed,
            rng=rng,
            mode="narration",
            player=player,
            world=world,
            position=world.spawn,
            encounter_multiplier=clamp_multiplier(self._settings.encounter_multiplier),
        )

    def current_events(self, state: SessionState) -> List[SessionEvent]:
        """Describe what is on screen right now (used after start and restart)."""
        if state.mode == "narration":
            return [self._narration_event(state.narration_index)]
        if state.mode == "exploration":
            return [ExplorationStartedEvent(position=state.position)]
        if state.combat is not None:
            return [
                EncounterStartedEvent(
                    enemy_id=state.combat.template.id,
                    enemy_name=state.combat.enemy.display_name,
                    lines=list(state.combat_log),
                )
            ]
        return []

    def restart(self, state: SessionState, reason: str = "manual") -> CommandResult:
        """Full reset: fresh player, new island, back to the first narration line."""
        world = generate_world(self._settings.width, self._settings.height, state.rng)
        player = create_player(self._settings.hero_id, self._heroes_repo)

        state.player = player
        state.world = world
        state.position = world.spawn
        state.combat = None
        state.combat_log = []
        state.completed = False
        state.narration_index = 0
        state.mode = "narration"
        state.restarts += 1
        logger.info("Session restarted (%s); spawn=%s goal=%s", reason, world.spawn, world.goal)
        return CommandResult(
            accepted=True,
            events=[SessionRestartedEvent(reason=reason), self._narration_event(0)],
        )

    # -----------------------
    # Player commands
    # -----------------------
    def confirm(self, state: SessionState) -> CommandResult:
        """Advance narration, acknowledge a finished fight, or restart a completed run."""
        if state.completed:
            return self.restart(state, reason="completed")

        if state.mode == "narration":
            next_index = self._narration.advance(state.narration_index)
            if next_index is None:
                return CommandResult(accepted=True, events=[self._enter_exploration(state)])
            state.narration_index = next_index
            return CommandResult(accepted=True, events=[self._narration_event(next_index)])

        if state.mode == "combat" and self._combat.get_available_actions(state)["can_acknowledge"]:
            outcome = state.combat.phase
            if outcome == "lost":
                result = self.restart(state, reason="defeat")
                result.events.insert(0, CombatEndedEvent(outcome=outcome))
                return result
            return CommandResult(
                accepted=True,
                events=[CombatEndedEvent(outcome=outcome), self._enter_exploration(state)],
            )

        return _rejected()

    def move(self, state: SessionState, direction: Direction) -> CommandResult:
        """Step one tile; may finish the session or start an encounter."""
        if state.mode != "exploration" or state.completed:
            return _rejected()
        delta = DIRECTION_DELTAS.get(direction)
        if delta is None:
            return _rejected()

        grid = state.world.grid
        origin = state.position
        destination = (origin[0] + delta[0], origin[1] + delta[1])
        if not grid.is_walkable(*destination):
            return _rejected()

        state.position = destination
        tile = grid.get(*destination)
        events: List[SessionEvent] = [PlayerMovedEvent(from_position=origin, to_position=destination, tile=tile)]

        if tile is TileKind.GOAL:
            state.completed = True
            logger.info("Goal reached at %s with %d xp / %d gold", destination, state.player.xp, state.player.gold)
            events.append(SessionCompletedEvent(xp=state.player.xp, gold=state.player.gold))
            return CommandResult(accepted=True, events=events)

        if roll_encounter(grid, destination, state.rng, state.encounter_multiplier):
            events.append(self._begin_encounter(state))
        return CommandResult(accepted=True, events=events)

    def attack(self, state: SessionState) -> CommandResult:
        return self._combat_action(state, CombatAction(action_type="attack"))

    def run(self, state: SessionState) -> CommandResult:
        return self._combat_action(state, CombatAction(action_type="run"))

    # -----------------------
    # Views
    # -----------------------
    def combat_view(self, state: SessionState) -> CombatView | None:
        """Return the encounter view, or None outside combat."""
        if state.mode != "combat" or state.combat is None:
            return None
        return self._combat.get_combat_view(state.combat)

    def available_actions(self, state: SessionState) -> dict:
        return self._combat.get_available_actions(state)

    # -----------------------
    # Debug commands
    # -----------------------
    def toggle_debug(self, state: SessionState) -> CommandResult:
        state.debug_visible = not state.debug_visible
        return CommandResult(accepted=True, events=[DebugToggledEvent(visible=state.debug_visible)])

    def debug_set_position(self, state: SessionState, x: int, y: int) -> CommandResult:
        """Teleport within the grid; the clamped target must be walkable."""
        grid = state.world.grid
        target = (max(0, min(grid.width - 1, int(x))), max(0, min(grid.height - 1, int(y))))
        if not grid.is_walkable(*target):
            return _rejected()
        state.position = target
        return CommandResult(accepted=True, events=[DebugOverrideEvent(field="position", value=target)])

    def debug_set_hp(self, state: SessionState, hp: int) -> CommandResult:
        """Set current health, clamped to [1, max_hp]."""
        stats = state.player.stats
        stats.hp = max(1, min(stats.max_hp, int(hp)))
        return CommandResult(accepted=True, events=[DebugOverrideEvent(field="hp", value=stats.hp)])

    def debug_set_encounter_multiplier(self, state: SessionState, value: float) -> CommandResult:
        state.encounter_multiplier = clamp_multiplier(value)
        return CommandResult(
            accepted=True,
            events=[DebugOverrideEvent(field="encounter_multiplier", value=state.encounter_multiplier)],
        )

    def debug_start_combat(self, state: SessionState) -> CommandResult:
        if state.completed or (state.combat is not None and not state.combat.is_over):
            return _rejected()
        state.combat = None
        return CommandResult(accepted=True, events=[self._begin_encounter(state)])

    def debug_force_outcome(self, state: SessionState, outcome: CombatPhase) -> CommandResult:
        """End the current encounter as a win or a flight."""
        if outcome not in ("won", "fled"):
            return _rejected()
        if state.mode != "combat" or state.combat is None or state.combat.is_over:
            return _rejected()
        result = self._combat.force_outcome(state, outcome)
        return CommandResult(accepted=True, events=[self._record_round(state, result)])

    def debug_set_mode(self, state: SessionState, mode: SessionMode) -> CommandResult:
        if mode not in SESSION_MODES or state.completed:
            return _rejected()
        if mode == "combat":
            return self.debug_start_combat(state)
        if mode == "exploration":
            return CommandResult(accepted=True, events=[self._enter_exploration(state)])
        state.combat = None
        state.combat_log = []
        state.narration_index = 0
        self._set_mode(state, "narration")
        return CommandResult(accepted=True, events=[self._narration_event(0)])

    # -----------------------
    # Helpers
    # -----------------------
    def _combat_action(self, state: SessionState, action: CombatAction) -> CommandResult:
        actions = self._combat.get_available_actions(state)
        if state.mode != "combat" or not actions[f"can_{action.action_type}"]:
            return _rejected()
        try:
            result = self._combat.apply_player_action(state, action)
        except CombatContractError:
            logger.warning("Combat action %s rejected out of sequence", action.action_type)
            return _rejected()
        return CommandResult(accepted=True, events=[self._record_round(state, result)])

    def _record_round(self, state: SessionState, result: RoundResult) -> CombatRoundEvent:
        state.combat_log = list(result.log_lines)
        return CombatRoundEvent(
            outcome=result.outcome,
            lines=list(result.log_lines),
            player_hp=result.player_hp,
            enemy_hp=result.enemy_hp,
        )

    def _begin_encounter(self, state: SessionState) -> EncounterStartedEvent:
        templates, _ = self._enemies_repo.weighted()
        template = choose_enemy(templates, state.rng)
        combat, lines = self._combat.start(state, template)
        state.combat = combat
        state.combat_log = list(lines)
        self._set_mode(state, "combat")
        return EncounterStartedEvent(enemy_id=template.id, enemy_name=combat.enemy.display_name, lines=lines)

    def _enter_exploration(self, state: SessionState) -> ExplorationStartedEvent:
        state.combat = None
        state.combat_log = []
        self._set_mode(state, "exploration")
        return ExplorationStartedEvent(position=state.position)

    def _narration_event(self, index: int) -> NarrationLineEvent:
        view = self._narration.get_view(index)
        return NarrationLineEvent(index=view.index, total=view.total, text=view.text)

    @staticmethod
    def _set_mode(state: SessionState, mode: SessionMode) -> None:
        if state.mode != mode:
            logger.info("Mode %s -> %s", state.mode, mode)
        state.mode = mode
