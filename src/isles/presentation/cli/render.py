"""Shared CLI rendering helpers."""
from __future__ import annotations

import os
from typing import Callable, Dict, Iterable, List, Sequence

from isles.core.types import Position
from isles.domain.state import SessionState
from isles.domain.terrain import Grid, TileKind
from isles.services.controllers.combat_controller import CombatView
from isles.services.controllers.session_controller import (
    CombatEndedEvent,
    CombatRoundEvent,
    DebugOverrideEvent,
    DebugToggledEvent,
    EncounterStartedEvent,
    ExplorationStartedEvent,
    NarrationLineEvent,
    PlayerMovedEvent,
    SessionCompletedEvent,
    SessionEvent,
    SessionRestartedEvent,
)

TILE_CHARS: Dict[TileKind, str] = {
    TileKind.WATER: "~",
    TileKind.LAND: ".",
    TileKind.FOREST: "T",
    TileKind.MOUNTAIN: "^",
    TileKind.GOAL: "G",
}
PLAYER_CHAR = "@"

_TEXT_DISPLAY_MODE = "instant"


def debug_enabled() -> bool:
    """Return True only when ISLES_DEBUG is explicitly set to '1'."""
    return os.getenv("ISLES_DEBUG") == "1"


def set_text_display_mode(mode: str) -> None:
    global _TEXT_DISPLAY_MODE
    _TEXT_DISPLAY_MODE = "step" if mode == "step" else "instant"


def get_text_display_mode() -> str:
    return _TEXT_DISPLAY_MODE


def render_heading(title: str) -> None:
    """Print a consistent section heading."""
    print(f"\n=== {title} ===")


def render_lines(lines: Sequence[str], *, pause: Callable[[str], object] = input) -> None:
    """
    Print display lines.

    In ``step`` mode the reader presses enter between lines, which stands in for
    the timed reveal of a graphical front end.
    """
    for idx, line in enumerate(lines):
        print(line)
        if _TEXT_DISPLAY_MODE == "step" and idx < len(lines) - 1:
            pause("")


def grid_lines(grid: Grid, position: Position | None = None) -> List[str]:
    """Return one string per grid row with the player overlaid."""
    rows: List[str] = []
    for y in range(grid.height):
        chars = []
        for x in range(grid.width):
            if position is not None and (x, y) == position:
                chars.append(PLAYER_CHAR)
            else:
                chars.append(TILE_CHARS[grid.get(x, y)])
        rows.append("".join(chars))
    return rows


def status_line(state: SessionState) -> str:
    stats = state.player.stats
    return f"{state.player.name}  HP {stats.hp}/{stats.max_hp}  EXP {state.player.xp}  Gold {state.player.gold}"


def combat_line(view: CombatView, *, debug: bool = False) -> str:
    """Enemy status for the battle header."""
    enemy_hp = "DOWN" if view.enemy_hp <= 0 else f"{view.enemy_hp}/{view.enemy_max_hp}"
    line = f"{view.enemy_name}  HP {enemy_hp}"
    if debug:
        line += f"  [phase={view.phase}]"
    return line


def debug_lines(state: SessionState) -> List[str]:
    """Developer overlay shown when the debug panel is visible."""
    x, y = state.position
    lines = [
        f"[debug] seed={state.seed} mode={state.mode} pos=({x}, {y}) goal={state.world.goal}",
        f"[debug] encounter multiplier={state.encounter_multiplier:g} restarts={state.restarts}",
    ]
    if state.combat is not None:
        enemy = state.combat.enemy.stats
        lines.append(
            f"[debug] enemy={state.combat.template.id} hp={enemy.hp}/{enemy.max_hp} phase={state.combat.phase}"
        )
    return lines


def format_event(event: SessionEvent) -> List[str]:
    """Turn one display event into printable lines."""
    if isinstance(event, NarrationLineEvent):
        return [event.text]
    if isinstance(event, ExplorationStartedEvent):
        return ["You set foot on the island. Find the goal marked G."]
    if isinstance(event, PlayerMovedEvent):
        return []
    if isinstance(event, EncounterStartedEvent):
        return list(event.lines)
    if isinstance(event, CombatRoundEvent):
        return list(event.lines)
    if isinstance(event, CombatEndedEvent):
        return []
    if isinstance(event, SessionCompletedEvent):
        return [
            "You reached the goal!",
            f"Final tally: {event.xp} EXP and {event.gold} Gold.",
            "Press enter to play again.",
        ]
    if isinstance(event, SessionRestartedEvent):
        if event.reason == "defeat":
            return ["Your journey ends here... The tide carries you back to the start."]
        return ["A new island rises from the sea."]
    if isinstance(event, DebugToggledEvent):
        return [f"Debug panel {'shown' if event.visible else 'hidden'}."]
    if isinstance(event, DebugOverrideEvent):
        return [f"[debug] {event.field} = {event.value}"]
    return []


def format_events(events: Iterable[SessionEvent]) -> List[str]:
    lines: List[str] = []
    for event in events:
        lines.extend(format_event(event))
    return lines
