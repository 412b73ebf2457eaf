"""Procedural island generation.

The generator runs in fixed stages over a single ``Grid``:

1. island mask (noisy ellipse, water ring forced on the border)
2. mountain ranges (biased cardinal walks started away from the coast)
3. forest clusters (8-neighbourhood walks plus isolated sprinkles)
4. goal placement (northern bands first, closest to the horizontal centre)
5. spawn selection (southern band, then an expanding square search from the centre)

Every random decision is drawn from the injected ``RNG`` so a seed fully
determines the resulting world.
"""
from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass
from typing import Callable, Iterable, Sequence, Set, Tuple

from isles.core.rng import RNG
from isles.core.types import Position
from isles.domain.terrain import Grid, TileKind, World
from isles.services.errors import ConfigurationError

logger = logging.getLogger(__name__)

MIN_DIMENSION = 12
MAX_RADIUS = 40.0
ISLAND_RADIUS_RATIO = 0.32
NOISE_AMPLITUDE = 0.18

MOUNTAIN_RANGE_LIMITS = (3, 8)
MOUNTAIN_LENGTH_LIMITS = (3, 6)
MOUNTAIN_LAND_PER_RANGE = 60
MOUNTAIN_INTERIOR_THRESHOLD = 0.6
MOUNTAIN_STRAIGHT_CHANCE = 0.7
MOUNTAIN_TURN_CHANCE = 0.2

FOREST_SEED_LIMITS = (2, 10)
FOREST_LAND_PER_SEED = 40
FOREST_CLUSTER_LIMITS = (3, 12)
FOREST_SPRINKLE_CHANCE = 0.03

GOAL_BANDS = (0.4, 0.6, 0.8, 1.0)
SPAWN_BAND_ROWS = 6
DEFAULT_SPAWN: Position = (1, 1)

MAX_PICK_ATTEMPTS = 50
MAX_PLACEMENT_ATTEMPTS = 200

# Clockwise order so that index +1 is a right turn and -1 a left turn.
CARDINALS: Tuple[Position, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))
NEIGHBOURS_8: Tuple[Position, ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0), (1, 0),
    (-1, 1), (0, 1), (1, 1),
)


@dataclass(slots=True, frozen=True)
class IslandShape:
    """Ellipse used for the island mask and the interior bias."""

    center_x: float
    center_y: float
    radius_x: float
    radius_y: float

    @classmethod
    def for_grid(cls, width: int, height: int) -> "IslandShape":
        return cls(
            center_x=(width - 1) / 2,
            center_y=(height - 1) / 2,
            radius_x=min(width * ISLAND_RADIUS_RATIO, MAX_RADIUS),
            radius_y=min(height * ISLAND_RADIUS_RATIO, MAX_RADIUS),
        )

    def distance(self, x: int, y: int) -> float:
        """Squared normalised distance: < 1 inside the ellipse."""
        dx = (x - self.center_x) / self.radius_x
        dy = (y - self.center_y) / self.radius_y
        return dx * dx + dy * dy


def noise2d(x: float, y: float) -> float:
    """Deterministic hash of a coordinate pair mapped to [0, 1)."""
    s = math.sin(x * 12.9898 + y * 78.233) * 43758.5453
    return s - math.floor(s)


def generate_world(width: int, height: int, rng: RNG) -> World:
    """Build an island grid with mountains, forests, a goal and a spawn point."""
    if width < MIN_DIMENSION or height < MIN_DIMENSION:
        raise ConfigurationError(
            f"World must be at least {MIN_DIMENSION}x{MIN_DIMENSION} tiles (got {width}x{height})."
        )

    shape = IslandShape.for_grid(width, height)
    grid = build_island_mask(width, height, shape)
    land_count = grid.count(TileKind.LAND)
    if land_count == 0:
        raise ConfigurationError(f"A {width}x{height} grid does not contain any land.")

    ranges = place_mountain_ranges(grid, rng, shape, land_count)
    clusters = place_forest_clusters(grid, rng, land_count)
    goal = place_goal(grid)
    spawn = find_spawn(grid, allowed=connected_walkable(grid, goal))

    logger.debug(
        "Generated %dx%d island: land=%d mountains=%d (ranges=%d) forests=%d (clusters=%d) goal=%s spawn=%s",
        width,
        height,
        land_count,
        grid.count(TileKind.MOUNTAIN),
        ranges,
        grid.count(TileKind.FOREST),
        clusters,
        goal,
        spawn,
    )
    return World(grid=grid, goal=goal, spawn=spawn)


def generate_world_from_seed(width: int, height: int, seed: int | None = None) -> World:
    """Convenience wrapper that owns its RNG."""
    return generate_world(width, height, RNG(seed))


# -----------------------
# Island mask
# -----------------------
def build_island_mask(width: int, height: int, shape: IslandShape) -> Grid:
    grid = Grid.filled(width, height, TileKind.WATER)
    for y in range(height):
        for x in range(width):
            jitter = (noise2d(x * 13.37, y * 7.17) - 0.5) * NOISE_AMPLITUDE
            if shape.distance(x, y) + jitter < 1:
                grid.tiles[y][x] = TileKind.LAND
    _force_water_border(grid)
    return grid


def _force_water_border(grid: Grid) -> None:
    for x in range(grid.width):
        grid.tiles[0][x] = TileKind.WATER
        grid.tiles[grid.height - 1][x] = TileKind.WATER
    for y in range(grid.height):
        grid.tiles[y][0] = TileKind.WATER
        grid.tiles[y][grid.width - 1] = TileKind.WATER


# -----------------------
# Mountains
# -----------------------
def place_mountain_ranges(grid: Grid, rng: RNG, shape: IslandShape, land_count: int) -> int:
    """Carve mountain ranges and return how many were started."""
    low, high = MOUNTAIN_RANGE_LIMITS
    count = _clamp(land_count // MOUNTAIN_LAND_PER_RANGE, low, high)
    started = 0
    for _ in range(count):
        start = _pick_cell(
            grid,
            rng,
            lambda x, y: grid.tiles[y][x] is TileKind.LAND and shape.distance(x, y) < MOUNTAIN_INTERIOR_THRESHOLD,
        )
        if start is None:
            start = _pick_any(grid, rng, TileKind.LAND)
        if start is None:
            break
        _walk_mountain_range(grid, rng, start)
        started += 1
    return started


def _walk_mountain_range(grid: Grid, rng: RNG, start: Position) -> None:
    heading = rng.randint(0, len(CARDINALS) - 1)
    length = rng.randint(*MOUNTAIN_LENGTH_LIMITS)
    x, y = start
    for _ in range(length):
        if not grid.in_bounds(x, y) or grid.tiles[y][x] not in (TileKind.LAND, TileKind.MOUNTAIN):
            break
        grid.tiles[y][x] = TileKind.MOUNTAIN
        roll = rng.random()
        if roll < MOUNTAIN_STRAIGHT_CHANCE:
            pass
        elif roll < MOUNTAIN_STRAIGHT_CHANCE + MOUNTAIN_TURN_CHANCE / 2:
            heading = (heading - 1) % len(CARDINALS)
        elif roll < MOUNTAIN_STRAIGHT_CHANCE + MOUNTAIN_TURN_CHANCE:
            heading = (heading + 1) % len(CARDINALS)
        else:
            heading = rng.randint(0, len(CARDINALS) - 1)
        dx, dy = CARDINALS[heading]
        x, y = x + dx, y + dy


# -----------------------
# Forests
# -----------------------
def place_forest_clusters(grid: Grid, rng: RNG, land_count: int) -> int:
    """Grow forest clusters, sprinkle lone trees and return the cluster count."""
    low, high = FOREST_SEED_LIMITS
    seeds = _clamp(land_count // FOREST_LAND_PER_SEED, low, high)
    grown = 0
    for _ in range(seeds):
        start = _pick_cell(grid, rng, lambda x, y: grid.tiles[y][x] is TileKind.LAND)
        if start is None:
            break
        _grow_forest(grid, rng, start, rng.randint(*FOREST_CLUSTER_LIMITS))
        grown += 1

    for x, y, kind in list(grid.cells()):
        if kind is TileKind.LAND and rng.random() < FOREST_SPRINKLE_CHANCE:
            grid.tiles[y][x] = TileKind.FOREST
    return grown


def _grow_forest(grid: Grid, rng: RNG, start: Position, size: int) -> None:
    x, y = start
    for _ in range(size):
        if grid.tiles[y][x] is TileKind.LAND:
            grid.tiles[y][x] = TileKind.FOREST
        dx, dy = rng.choice(NEIGHBOURS_8)
        nx, ny = x + dx, y + dy
        if grid.in_bounds(nx, ny) and grid.tiles[ny][nx] in (TileKind.LAND, TileKind.FOREST):
            x, y = nx, ny


# -----------------------
# Goal
# -----------------------
def place_goal(grid: Grid) -> Position:
    """Convert one land tile into the goal, preferring the north of the island.

    Only tiles of the largest walkable region qualify, so a pocket sealed off
    by mountains never holds the goal.
    """
    mainland = largest_walkable_region(grid)
    land = grid.positions_of(TileKind.LAND)
    if land:
        top = min(y for _, y in land)
        extent = max(y for _, y in land) - top + 1
        center_x = (grid.width - 1) / 2
        attempts = 0
        for fraction in GOAL_BANDS:
            limit = top + math.ceil(extent * fraction) - 1
            band = sorted(
                (pos for pos in land if pos[1] <= limit),
                key=lambda pos: (abs(pos[0] - center_x), pos[1], pos[0]),
            )
            for x, y in band:
                if attempts >= MAX_PLACEMENT_ATTEMPTS:
                    break
                attempts += 1
                if (x, y) in mainland:
                    grid.tiles[y][x] = TileKind.GOAL
                    return x, y

    for kind in (TileKind.LAND, TileKind.FOREST):
        for x, y, tile in grid.cells():
            if tile is kind and (x, y) in mainland:
                logger.debug("Goal bands exhausted; falling back to scan at (%d, %d)", x, y)
                grid.tiles[y][x] = TileKind.GOAL
                return x, y
    raise ConfigurationError("No land tile is available for the goal.")


# -----------------------
# Spawn
# -----------------------
def find_spawn(grid: Grid, allowed: Set[Position] | None = None) -> Position:
    """Pick a walkable, non-goal spawn near the south of the island.

    ``allowed`` restricts the search to a set of positions (normally the
    region connected to the goal); the search relaxes to the whole grid when
    the restricted region yields nothing.
    """
    regions: list[Set[Position] | None] = [allowed] if allowed else []
    regions.append(None)
    for region in regions:
        spawn = _find_spawn_in(grid, region)
        if spawn is not None:
            return spawn
    logger.warning("No walkable spawn found; using default %s", DEFAULT_SPAWN)
    return DEFAULT_SPAWN


def _find_spawn_in(grid: Grid, region: Set[Position] | None) -> Position | None:
    def usable(x: int, y: int) -> bool:
        if region is not None and (x, y) not in region:
            return False
        return grid.is_walkable(x, y) and grid.tiles[y][x] is not TileKind.GOAL

    rows = [y for y in range(grid.height) if any(usable(x, y) for x in range(grid.width))]
    if rows:
        southmost = max(rows)
        for y in range(southmost, max(-1, southmost - SPAWN_BAND_ROWS), -1):
            for x in _columns_from_center(grid.width):
                if usable(x, y):
                    return x, y

    # expanding square search: each radius rescans its whole square row by row
    center_x, center_y = grid.width // 2, grid.height // 2
    for radius in range(max(grid.width, grid.height)):
        for dy in range(-radius, radius + 1):
            for dx in range(-radius, radius + 1):
                x, y = center_x + dx, center_y + dy
                if grid.in_bounds(x, y) and usable(x, y):
                    return x, y
    return None


def _columns_from_center(width: int) -> Iterable[int]:
    center = width // 2
    yield center
    for offset in range(1, width):
        if center - offset >= 0:
            yield center - offset
        if center + offset < width:
            yield center + offset


# -----------------------
# Helpers
# -----------------------
def connected_walkable(grid: Grid, start: Position) -> Set[Position]:
    """Return every walkable position reachable from ``start`` by cardinal steps."""
    if not grid.is_walkable(*start):
        return set()
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in CARDINALS:
            nxt = (x + dx, y + dy)
            if nxt not in seen and grid.is_walkable(*nxt):
                seen.add(nxt)
                queue.append(nxt)
    return seen


def largest_walkable_region(grid: Grid) -> Set[Position]:
    """Return the biggest cardinally connected walkable region (first found wins ties)."""
    seen: Set[Position] = set()
    best: Set[Position] = set()
    for x, y, _ in grid.cells():
        if (x, y) in seen or not grid.is_walkable(x, y):
            continue
        region = connected_walkable(grid, (x, y))
        seen |= region
        if len(region) > len(best):
            best = region
    return best


def _pick_cell(grid: Grid, rng: RNG, accept: Callable[[int, int], bool]) -> Position | None:
    for _ in range(MAX_PICK_ATTEMPTS):
        x = rng.randint(1, grid.width - 2)
        y = rng.randint(1, grid.height - 2)
        if accept(x, y):
            return x, y
    return None


def _pick_any(grid: Grid, rng: RNG, kind: TileKind) -> Position | None:
    candidates: Sequence[Position] = grid.positions_of(kind)
    if not candidates:
        return None
    return rng.choice(candidates)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))
