"""Console-driven UI loop for Emerald Isles."""
from __future__ import annotations

import logging
import os
import secrets
from typing import Literal

from isles.data.repositories import EnemiesRepository, HeroRepository, NarrationRepository
from isles.domain.state import SessionState
from isles.presentation.cli.config import load_config
from isles.presentation.cli.render import (
    combat_line,
    debug_enabled,
    debug_lines,
    format_events,
    grid_lines,
    render_heading,
    render_lines,
    set_text_display_mode,
    status_line,
)
from isles.services.combat_service import CombatService
from isles.services.controllers import CombatController, CommandResult, SessionController, SessionSettings
from isles.services.narration_service import NarrationService

LoopAction = Literal["continue", "quit"]
_MAX_RANDOM_SEED = 2**31 - 1
_MOVE_KEYS = {"w": "north", "a": "west", "s": "south", "d": "east"}
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Set the root log level from ISLES_LOG_LEVEL; ISLES_DEBUG=1 forces DEBUG."""
    level_name = os.getenv("ISLES_LOG_LEVEL", "WARNING").upper()
    level = logging.DEBUG if debug_enabled() else getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def main() -> None:
    """Start the interactive CLI session."""
    configure_logging()
    config = load_config()
    set_text_display_mode(str(config["text_display_mode"]))
    controller = _build_session_controller(float(config["encounter_multiplier"]))
    print("=== Emerald Isles ===")
    try:
        seed = _prompt_seed()
        state = controller.new_session(seed)
        if debug_enabled():
            state.debug_visible = True
        print(f"Island generated with seed: {seed}")
        render_lines(format_events(controller.current_events(state)))
        while _run_once(controller, state) == "continue":
            pass
    except (KeyboardInterrupt, EOFError):
        print()
    print("Goodbye!")


def _build_session_controller(encounter_multiplier: float = 1.0) -> SessionController:
    """Construct the SessionController with concrete repositories."""
    narration_repo = NarrationRepository()
    return SessionController(
        narration_service=NarrationService(narration_repo),
        combat_controller=CombatController(CombatService()),
        enemies_repo=EnemiesRepository(),
        heroes_repo=HeroRepository(),
        settings=SessionSettings(encounter_multiplier=encounter_multiplier),
    )


def _prompt_seed() -> int:
    while True:
        raw_value = input("Enter seed (blank for random): ").strip()
        if not raw_value:
            return secrets.randbelow(_MAX_RANDOM_SEED)
        try:
            return int(raw_value)
        except ValueError:
            print("Invalid seed. Please enter a valid integer.")


def _run_once(controller: SessionController, state: SessionState) -> LoopAction:
    _render_screen(controller, state)
    raw = input(_prompt_for(controller, state)).strip()
    if raw.lower() == "q":
        return "quit"
    result = dispatch_command(controller, state, raw)
    if result is None:
        logger.debug("Unrecognised input %r", raw)
        print("Unknown command.")
    elif not result.accepted:
        print("You can't do that right now.")
    else:
        render_lines(format_events(result.events))
    return "continue"


def dispatch_command(controller: SessionController, state: SessionState, raw: str) -> CommandResult | None:
    """
    Map one line of console input onto a controller command.

    Returns None when the input is not a recognised command.
    """
    text = raw.strip()
    key = text.lower()
    if key == "":
        return controller.confirm(state)
    if key in _MOVE_KEYS:
        return controller.move(state, _MOVE_KEYS[key])
    if key == "1":
        return controller.attack(state)
    if key == "2":
        return controller.run(state)
    if key == "r":
        return controller.restart(state)
    if key == "`":
        return controller.toggle_debug(state)
    if key.startswith(":"):
        return _dispatch_debug(controller, state, key[1:].split())
    return None


def _dispatch_debug(controller: SessionController, state: SessionState, parts: list[str]) -> CommandResult | None:
    if not parts:
        return None
    name, args = parts[0], parts[1:]
    try:
        if name == "hp" and len(args) == 1:
            return controller.debug_set_hp(state, int(args[0]))
        if name == "pos" and len(args) == 2:
            return controller.debug_set_position(state, int(args[0]), int(args[1]))
        if name == "enc" and len(args) == 1:
            return controller.debug_set_encounter_multiplier(state, float(args[0]))
    except ValueError:
        return None
    if name == "win" and not args:
        return controller.debug_force_outcome(state, "won")
    if name == "flee" and not args:
        return controller.debug_force_outcome(state, "fled")
    if name == "fight" and not args:
        return controller.debug_start_combat(state)
    if name == "mode" and len(args) == 1:
        return controller.debug_set_mode(state, args[0])
    return None


def _render_screen(controller: SessionController, state: SessionState) -> None:
    if state.mode == "exploration" and not state.completed:
        render_heading("Island")
        for row in grid_lines(state.world.grid, state.position):
            print(row)
    view = controller.combat_view(state)
    if view is not None:
        render_heading(f"Battle - Turn {view.turn}")
        print(combat_line(view, debug=state.debug_visible))
    if state.mode != "narration":
        print(status_line(state))
    if state.debug_visible:
        for line in debug_lines(state):
            print(line)


def _prompt_for(controller: SessionController, state: SessionState) -> str:
    if state.completed:
        return "[enter] play again, [q] quit: "
    if state.mode == "narration":
        return "[enter] continue: "
    if state.mode == "combat":
        actions = controller.available_actions(state)
        if actions["can_acknowledge"]:
            return "[enter] continue: "
        options = []
        if actions["can_attack"]:
            options.append("1. Attack")
        if actions["can_run"]:
            options.append("2. Run")
        return "  ".join(options) + " > "
    return "Move with w/a/s/d, [r] restart: "
