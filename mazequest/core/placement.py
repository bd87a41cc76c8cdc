"""Entity placement

Samples spawn cells for enemies, stalkers, teleporters and regenerate
icons. Every candidate is a plain path cell that passes the kind's
Manhattan-distance gate; cells are drawn without replacement.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Iterable, Literal, Optional

from .maze import CellKind, Grid, Position, manhattan
from .rules import (
    ENEMY_MIN_START_DISTANCE,
    ICON_MIN_DISTANCE,
    STALKER_MIN_START_DISTANCE,
    enemy_count,
    is_unlocked,
    stalker_count,
    teleporter_count,
)

logger = logging.getLogger(__name__)

EntityKind = Literal["enemies", "regenerate_icons", "teleporters", "stalkers"]


@dataclass
class EntityLayout:
    """Everything spawned on top of a maze."""
    enemies: list[Position] = field(default_factory=list)
    stalkers: list[Position] = field(default_factory=list)
    teleporters: list[Position] = field(default_factory=list)
    regenerate_icons: list[Position] = field(default_factory=list)


def _sample(candidates: list[Position], count: int, rng) -> list[Position]:
    """Draw up to count cells without replacement."""
    return rng.sample(candidates, min(count, len(candidates)))


def spawn_enemies(level: int, grid: Grid, start: Position, rng) -> list[Position]:
    count = enemy_count(level)
    if count == 0:
        return []
    candidates = [
        pos for pos in grid.cells_of(CellKind.PATH)
        if manhattan(pos, start) > ENEMY_MIN_START_DISTANCE
    ]
    return _sample(candidates, count, rng)


def spawn_regenerate_icons(level: int, grid: Grid, start: Position, rng) -> list[Position]:
    """Regenerate icons keep away from both the start and the exit."""
    if not is_unlocked("regenerate_icons", level):
        return []
    count = (2 if rng.random() < 0.5 else 3) + 2
    exit_pos = grid.exit_position
    candidates = [
        pos for pos in grid.cells_of(CellKind.PATH)
        if manhattan(pos, start) > ICON_MIN_DISTANCE
        and manhattan(pos, exit_pos) > ICON_MIN_DISTANCE
    ]
    return _sample(candidates, count, rng)


def spawn_teleporters(
    level: int,
    grid: Grid,
    start: Position,
    rng,
    exclude: Iterable[Position] = (),
) -> list[Position]:
    """Teleporters are paired by index (0-1, 2-3, ...).

    Args:
        exclude: cells already taken, normally the regenerate icons

    Returns:
        an even-length list; an unpaired last pick is dropped
    """
    count = teleporter_count(level)
    if count == 0:
        return []
    taken = set(exclude)
    taken.update((start, grid.exit_position))
    candidates = [pos for pos in grid.cells_of(CellKind.PATH) if pos not in taken]
    picked = _sample(candidates, count, rng)
    return picked[: len(picked) - len(picked) % 2]


def spawn_stalkers(level: int, grid: Grid, start: Position, rng) -> list[Position]:
    count = stalker_count(level)
    if count == 0:
        return []
    candidates = [
        pos for pos in grid.cells_of(CellKind.PATH)
        if manhattan(pos, start) > STALKER_MIN_START_DISTANCE
    ]
    return _sample(candidates, count, rng)


def place(
    kind: EntityKind,
    level: int,
    grid: Grid,
    start: Position,
    rng: Optional[random.Random] = None,
    exclude: Iterable[Position] = (),
) -> list[Position]:
    """Spawn positions for a single entity kind."""
    rng = rng or random
    if kind == "enemies":
        return spawn_enemies(level, grid, start, rng)
    if kind == "regenerate_icons":
        return spawn_regenerate_icons(level, grid, start, rng)
    if kind == "teleporters":
        return spawn_teleporters(level, grid, start, rng, exclude)
    if kind == "stalkers":
        return spawn_stalkers(level, grid, start, rng)
    raise ValueError(f"unknown entity kind: {kind}")


def spawn_all(
    level: int,
    grid: Grid,
    start: Position,
    rng: Optional[random.Random] = None,
) -> EntityLayout:
    """Spawn every entity kind for a freshly loaded or regenerated maze."""
    rng = rng or random
    icons = spawn_regenerate_icons(level, grid, start, rng)
    layout = EntityLayout(
        enemies=spawn_enemies(level, grid, start, rng),
        stalkers=spawn_stalkers(level, grid, start, rng),
        teleporters=spawn_teleporters(level, grid, start, rng, exclude=icons),
        regenerate_icons=icons,
    )
    logger.debug(
        "spawned level=%s enemies=%s stalkers=%s teleporters=%s icons=%s",
        level,
        len(layout.enemies),
        len(layout.stalkers),
        len(layout.teleporters),
        len(layout.regenerate_icons),
    )
    return layout
