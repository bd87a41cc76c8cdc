"""Enemy and stalker movement

Enemies follow a greedy heuristic with random tie-breaks; stalkers walk
the breadth-first shortest path towards the player.
"""

import random
from collections import deque
from typing import Optional

from .maze import Grid, Position

# Enemies look up, down, left, right
ENEMY_STEPS = [(0, -1), (0, 1), (-1, 0), (1, 0)]

# Stalker search order: down, up, right, left
STALKER_STEPS = [(0, 1), (0, -1), (1, 0), (-1, 0)]


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _step_score(step: tuple[int, int], dx: int, dy: int) -> int:
    """2 for closing the larger gap, 1 for the smaller one, else 0."""
    mdx, mdy = step
    toward_x = mdx != 0 and mdx == _sign(dx)
    toward_y = mdy != 0 and mdy == _sign(dy)
    if abs(dx) > abs(dy):
        return 2 if toward_x else 1 if toward_y else 0
    return 2 if toward_y else 1 if toward_x else 0


def step_enemy(grid: Grid, enemy: Position, player: Position, rng=None) -> Position:
    """Next cell for one enemy; it stays put when boxed in."""
    rng = rng or random
    x, y = enemy
    dx, dy = player[0] - x, player[1] - y

    scored = [
        ((x + mx, y + my), _step_score((mx, my), dx, dy))
        for mx, my in ENEMY_STEPS
        if grid.is_open(x + mx, y + my)
    ]
    if not scored:
        return enemy

    best = max(score for _, score in scored)
    return rng.choice([pos for pos, score in scored if score == best])


def move_enemies(
    grid: Grid,
    enemies: list[Position],
    player: Position,
    rng: Optional[random.Random] = None,
) -> list[Position]:
    return [step_enemy(grid, enemy, player, rng) for enemy in enemies]


def shortest_path(grid: Grid, start: Position, goal: Position) -> Optional[list[Position]]:
    """Breadth-first search over walkable cells.

    Returns:
        cells from start to goal inclusive, or None when unreachable
    """
    parents: dict[Position, Optional[Position]] = {start: None}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        if current == goal:
            path = []
            node: Optional[Position] = current
            while node is not None:
                path.append(node)
                node = parents[node]
            path.reverse()
            return path

        for neighbor in grid.open_neighbors(current, STALKER_STEPS):
            if neighbor not in parents:
                parents[neighbor] = current
                queue.append(neighbor)

    return None


def step_stalker(grid: Grid, stalker: Position, player: Position) -> Position:
    path = shortest_path(grid, stalker, player)
    if path and len(path) > 1:
        return path[1]
    return stalker


def move_stalkers(grid: Grid, stalkers: list[Position], player: Position) -> list[Position]:
    return [step_stalker(grid, stalker, player) for stalker in stalkers]
