"""Maze generation

Randomized depth-first carving on a step-2 lattice, followed by a few
random wall knock-downs that open loops and shortcuts.
"""

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from .rules import maze_size, wall_removal_attempts

logger = logging.getLogger(__name__)

Position = tuple[int, int]


class CellKind(str, Enum):
    """Kind of a maze cell, valued by its one-character map code."""
    WALL = "W"
    PATH = " "
    START = "S"
    EXIT = "E"


# Unit steps, (dx, dy)
DIRECTIONS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

# Carving visits every other cell so corridors stay one cell wide
CARVE_STEPS = [(0, -2), (0, 2), (-2, 0), (2, 0)]


@dataclass
class Grid:
    """Square maze grid, indexed as cells[y][x]."""
    size: int
    cells: list[list[CellKind]] = field(default_factory=list)

    @classmethod
    def filled(cls, size: int, kind: CellKind = CellKind.WALL) -> "Grid":
        return cls(size=size, cells=[[kind] * size for _ in range(size)])

    @classmethod
    def from_rows(cls, rows: list[str]) -> "Grid":
        """Build a grid from map strings ('W', ' ', 'S', 'E')."""
        size = len(rows)
        if any(len(row) != size for row in rows):
            raise ValueError("grid rows must form a square")
        return cls(size=size, cells=[[CellKind(ch) for ch in row] for row in rows])

    def to_rows(self) -> list[str]:
        return ["".join(cell.value for cell in row) for row in self.cells]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def get(self, x: int, y: int) -> Optional[CellKind]:
        """Cell kind at (x, y), or None outside the grid."""
        if self.in_bounds(x, y):
            return self.cells[y][x]
        return None

    def set(self, x: int, y: int, kind: CellKind) -> None:
        self.cells[y][x] = kind

    def is_open(self, x: int, y: int) -> bool:
        """True when (x, y) is inside the grid and not a wall."""
        kind = self.get(x, y)
        return kind is not None and kind is not CellKind.WALL

    def open_neighbors(self, pos: Position, steps=DIRECTIONS.values()) -> list[Position]:
        """Walkable cardinal neighbours of pos, in the order of steps."""
        x, y = pos
        return [(x + dx, y + dy) for dx, dy in steps if self.is_open(x + dx, y + dy)]

    def cells_of(self, kind: CellKind) -> list[Position]:
        """All positions of the given kind, row by row."""
        return [
            (x, y)
            for y, row in enumerate(self.cells)
            for x, cell in enumerate(row)
            if cell is kind
        ]

    def find(self, kind: CellKind) -> Optional[Position]:
        for y, row in enumerate(self.cells):
            for x, cell in enumerate(row):
                if cell is kind:
                    return (x, y)
        return None

    @property
    def start_position(self) -> Optional[Position]:
        return self.find(CellKind.START)

    @property
    def exit_position(self) -> Position:
        return (self.size - 2, self.size - 2)


def manhattan(a: Position, b: Position) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _shuffled_steps(rng) -> Iterator[tuple[int, int]]:
    steps = list(CARVE_STEPS)
    rng.shuffle(steps)
    return iter(steps)


def _carve(grid: Grid, origin: Position, rng) -> None:
    """Depth-first carving with an explicit stack.

    Each stack entry keeps the remaining shuffled directions of its cell,
    so backtracking resumes exactly where a recursive carve would.
    """
    limit = grid.size - 1
    grid.set(*origin, CellKind.PATH)
    stack = [(origin, _shuffled_steps(rng))]

    while stack:
        (cx, cy), steps = stack[-1]
        for dx, dy in steps:
            nx, ny = cx + dx, cy + dy
            if 0 < nx < limit and 0 < ny < limit and grid.get(nx, ny) is CellKind.WALL:
                grid.set(cx + dx // 2, cy + dy // 2, CellKind.PATH)
                grid.set(nx, ny, CellKind.PATH)
                stack.append(((nx, ny), _shuffled_steps(rng)))
                break
        else:
            # backtrack
            stack.pop()


def _is_flanked(grid: Grid, x: int, y: int) -> bool:
    """A wall between two open cells on the same axis."""
    horizontal = grid.is_open(x - 1, y) and grid.is_open(x + 1, y)
    vertical = grid.is_open(x, y - 1) and grid.is_open(x, y + 1)
    return horizontal or vertical


def _remove_walls(grid: Grid, attempts: int, rng) -> int:
    removed = 0
    for _ in range(attempts):
        rx = rng.randrange(grid.size - 2) + 1
        ry = rng.randrange(grid.size - 2) + 1
        if grid.get(rx, ry) is CellKind.WALL and _is_flanked(grid, rx, ry):
            grid.set(rx, ry, CellKind.PATH)
            removed += 1
    return removed


def generate_maze(level: int, rng: Optional[random.Random] = None) -> Grid:
    """Generate the maze for a level.

    Args:
        level: level number (>= 1); sizes stop growing at the final level
        rng: random source (None uses the module-level generator)

    Returns:
        grid with Start at (1, 1) and Exit at (size-2, size-2)
    """
    rng = rng or random
    size = maze_size(level)
    grid = Grid.filled(size)

    _carve(grid, (1, 1), rng)

    # Loops only after the spanning tree is complete
    removed = _remove_walls(grid, wall_removal_attempts(size, level), rng)

    grid.set(1, 1, CellKind.START)
    grid.set(*grid.exit_position, CellKind.EXIT)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "maze generated: level=%s size=%s walls_removed=%s solvable=%s",
            level, size, removed, is_solvable(grid),
        )
    return grid


def reachable_from(grid: Grid, origin: Position) -> set[Position]:
    """Flood fill over walkable cells starting at origin."""
    if not grid.is_open(*origin):
        return set()
    seen = {origin}
    queue = deque([origin])
    while queue:
        current = queue.popleft()
        for neighbor in grid.open_neighbors(current):
            if neighbor not in seen:
                seen.add(neighbor)
                queue.append(neighbor)
    return seen


def is_solvable(grid: Grid) -> bool:
    start = grid.start_position
    if start is None:
        return False
    return grid.exit_position in reachable_from(grid, start)


def _carve_corridor(grid: Grid, origin: Position, target: Position) -> None:
    """Open an L-shaped corridor, horizontal leg first."""
    x, y = origin
    tx, ty = target
    while x != tx:
        x += 1 if tx > x else -1
        if grid.get(x, y) is CellKind.WALL:
            grid.set(x, y, CellKind.PATH)
    while y != ty:
        y += 1 if ty > y else -1
        if grid.get(x, y) is CellKind.WALL:
            grid.set(x, y, CellKind.PATH)


def regenerate_around(level: int, anchor: Position, rng: Optional[random.Random] = None) -> Grid:
    """Generate a fresh maze whose Start sits on the anchor cell.

    The old Start at (1, 1) becomes a plain path. When the anchor lands
    somewhere the new maze cannot reach, a corridor is carved to the
    closest cell connected to the Exit.
    """
    grid = generate_maze(level, rng)
    if anchor != (1, 1):
        grid.set(1, 1, CellKind.PATH)
    grid.set(*anchor, CellKind.START)

    connected = reachable_from(grid, grid.exit_position)
    if anchor not in connected:
        target = min(connected, key=lambda pos: manhattan(pos, anchor))
        _carve_corridor(grid, anchor, target)
        logger.info("regeneration anchor %s was isolated, carved corridor to %s", anchor, target)
    return grid
