"""Tile interaction resolution

Decides what happens when the player occupies a cell. The checks run in
a fixed order and the first match wins:

    stalker > teleporter > regenerate icon > exit > enemy
"""

from dataclasses import dataclass
from typing import Literal, Optional

from .maze import CellKind, Grid, Position
from .placement import EntityLayout

InteractionKind = Literal["none", "caught", "teleport", "regenerate", "exit", "hit"]


@dataclass(frozen=True)
class Interaction:
    kind: InteractionKind
    destination: Optional[Position] = None


NO_INTERACTION = Interaction("none")


def teleport_destination(teleporters: list[Position], index: int) -> Optional[Position]:
    """Paired end of teleporter index (even -> +1, odd -> -1)."""
    target = index + 1 if index % 2 == 0 else index - 1
    if 0 <= target < len(teleporters):
        return teleporters[target]
    return None


def resolve_interaction(
    player: Position,
    grid: Grid,
    layout: EntityLayout,
    can_teleport: bool,
) -> Interaction:
    """Return the single interaction triggered at the player's cell.

    Args:
        player: the player's current cell
        grid: current maze
        layout: entity positions on the maze
        can_teleport: debounce flag; False while still standing on
            the teleporter the player arrived on

    Returns:
        the winning Interaction, or NO_INTERACTION
    """
    if player in layout.stalkers:
        return Interaction("caught")

    if can_teleport and player in layout.teleporters:
        destination = teleport_destination(layout.teleporters, layout.teleporters.index(player))
        if destination is not None:
            return Interaction("teleport", destination)

    if player in layout.regenerate_icons:
        return Interaction("regenerate")

    if grid.get(*player) is CellKind.EXIT:
        return Interaction("exit")

    if player in layout.enemies:
        return Interaction("hit")

    return NO_INTERACTION
