"""Shared type aliases for the core and domain layers."""
from typing import Dict, Literal, Tuple

SessionMode = Literal["narration", "exploration", "combat"]
Direction = Literal["north", "south", "east", "west"]
Position = Tuple[int, int]

DIRECTION_DELTAS: Dict[str, Position] = {
    "north": (0, -1),
    "south": (0, 1),
    "west": (-1, 0),
    "east": (1, 0),
}

SESSION_MODES: Tuple[SessionMode, ...] = ("narration", "exploration", "combat")

__all__ = ["DIRECTION_DELTAS", "Direction", "Position", "SESSION_MODES", "SessionMode"]
