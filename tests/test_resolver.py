"""Tests for the tile interaction priority chain."""

import pytest

from mazequest.core.maze import Grid
from mazequest.core.placement import EntityLayout
from mazequest.core.resolver import NO_INTERACTION, resolve_interaction, teleport_destination


@pytest.fixture
def grid(room):
    return Grid.from_rows(room)


def test_nothing_happens_on_empty_floor(grid):
    assert resolve_interaction((3, 3), grid, EntityLayout(), True) == NO_INTERACTION


def test_stalker_beats_everything(grid):
    cell = (2, 1)
    layout = EntityLayout(
        stalkers=[cell],
        teleporters=[cell, (4, 4)],
        regenerate_icons=[cell],
        enemies=[cell],
    )
    assert resolve_interaction(cell, grid, layout, True).kind == "caught"


def test_teleporter_beats_icon_and_enemy(grid):
    cell = (2, 1)
    layout = EntityLayout(teleporters=[(4, 4), cell], regenerate_icons=[cell], enemies=[cell])
    interaction = resolve_interaction(cell, grid, layout, True)
    assert interaction.kind == "teleport"
    assert interaction.destination == (4, 4)


def test_debounced_teleporter_falls_through(grid):
    cell = (2, 1)
    layout = EntityLayout(teleporters=[cell, (4, 4)], enemies=[cell])
    assert resolve_interaction(cell, grid, layout, False).kind == "hit"


def test_icon_beats_exit(grid):
    exit_pos = grid.exit_position
    layout = EntityLayout(regenerate_icons=[exit_pos], enemies=[exit_pos])
    assert resolve_interaction(exit_pos, grid, layout, True).kind == "regenerate"


def test_exit_beats_enemy(grid):
    exit_pos = grid.exit_position
    layout = EntityLayout(enemies=[exit_pos])
    assert resolve_interaction(exit_pos, grid, layout, True).kind == "exit"


def test_enemy_hit(grid):
    layout = EntityLayout(enemies=[(1, 1), (3, 2)])
    assert resolve_interaction((3, 2), grid, layout, True).kind == "hit"


@pytest.mark.parametrize("index, expected", [(0, 1), (1, 0), (2, 3), (3, 2)])
def test_teleporter_pairs(index, expected):
    teleporters = [(1, 2), (3, 4), (5, 1), (2, 5)]
    assert teleport_destination(teleporters, index) == teleporters[expected]


def test_unpaired_teleporter_is_inert(grid):
    cell = (4, 2)
    layout = EntityLayout(teleporters=[(2, 2), (3, 3), cell])
    assert teleport_destination(layout.teleporters, 2) is None
    assert resolve_interaction(cell, grid, layout, True) == NO_INTERACTION
