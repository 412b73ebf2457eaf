"""Terrain grid models."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Tuple

from isles.core.types import Position


class TileKind(str, Enum):
    """Categorical terrain type of a grid cell."""

    WATER = "water"
    LAND = "land"
    FOREST = "forest"
    MOUNTAIN = "mountain"
    GOAL = "goal"


WALKABLE_TILES = frozenset({TileKind.LAND, TileKind.FOREST, TileKind.GOAL})


@dataclass(slots=True)
class Grid:
    """Rectangular tile grid indexed as ``tiles[y][x]``."""

    width: int
    height: int
    tiles: List[List[TileKind]]

    @classmethod
    def filled(cls, width: int, height: int, kind: TileKind = TileKind.WATER) -> "Grid":
        return cls(width=width, height=height, tiles=[[kind] * width for _ in range(height)])

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> TileKind:
        if not self.in_bounds(x, y):
            raise IndexError(f"Position ({x}, {y}) is outside the {self.width}x{self.height} grid.")
        return self.tiles[y][x]

    def set(self, x: int, y: int, kind: TileKind) -> None:
        if not self.in_bounds(x, y):
            raise IndexError(f"Position ({x}, {y}) is outside the {self.width}x{self.height} grid.")
        self.tiles[y][x] = kind

    def is_walkable(self, x: int, y: int) -> bool:
        """Return True when the position is in bounds and the tile can be occupied."""
        return self.in_bounds(x, y) and self.tiles[y][x] in WALKABLE_TILES

    def cells(self) -> Iterator[Tuple[int, int, TileKind]]:
        """Yield ``(x, y, kind)`` row by row, top to bottom."""
        for y, row in enumerate(self.tiles):
            for x, kind in enumerate(row):
                yield x, y, kind

    def positions_of(self, kind: TileKind) -> List[Position]:
        return [(x, y) for x, y, tile in self.cells() if tile is kind]

    def count(self, kind: TileKind) -> int:
        return sum(1 for _, _, tile in self.cells() if tile is kind)


@dataclass(slots=True)
class World:
    """Result of terrain generation."""

    grid: Grid
    goal: Position
    spawn: Position
