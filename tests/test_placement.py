"""Tests for entity placement."""

import random

import pytest

from mazequest.core.maze import CellKind, Grid, generate_maze, manhattan
from mazequest.core.placement import place, spawn_all


def _maze(level, seed=0):
    grid = generate_maze(level, random.Random(seed))
    return grid, grid.start_position


def test_no_enemies_before_level_fifteen():
    grid, start = _maze(14)
    assert place("enemies", 14, grid, start, random.Random(1)) == []


def test_first_enemy_at_level_fifteen():
    grid, start = _maze(15)
    assert len(place("enemies", 15, grid, start, random.Random(1))) == 1


@pytest.mark.parametrize("level", [15, 18, 22, 30, 41])
def test_enemies_sit_on_path_away_from_start(level):
    grid, start = _maze(level, seed=level)
    enemies = place("enemies", level, grid, start, random.Random(level))
    assert len(enemies) == min(4, (level - 15) // 2 + 1)
    assert len(set(enemies)) == len(enemies)
    for pos in enemies:
        assert grid.get(*pos) is CellKind.PATH
        assert manhattan(pos, start) > 5


@pytest.mark.parametrize("seed", range(5))
def test_regenerate_icons(seed):
    grid, start = _maze(12, seed)
    icons = place("regenerate_icons", 12, grid, start, random.Random(seed))
    assert len(icons) in (4, 5)
    for pos in icons:
        assert grid.get(*pos) is CellKind.PATH
        assert manhattan(pos, start) > 8
        assert manhattan(pos, grid.exit_position) > 8


def test_no_icons_before_level_ten():
    grid, start = _maze(9)
    assert place("regenerate_icons", 9, grid, start, random.Random(0)) == []


@pytest.mark.parametrize("level, expected", [(20, 2), (24, 4), (28, 6), (50, 14)])
def test_teleporters_come_in_pairs(level, expected):
    grid, start = _maze(level, seed=level)
    icons = place("regenerate_icons", level, grid, start, random.Random(2))
    teleporters = place("teleporters", level, grid, start, random.Random(3), exclude=icons)
    assert len(teleporters) == expected
    assert not set(teleporters) & set(icons)
    assert start not in teleporters
    assert grid.exit_position not in teleporters
    assert all(grid.get(*pos) is CellKind.PATH for pos in teleporters)


def test_stalker_unlocks_at_twenty_five():
    grid, start = _maze(24)
    assert place("stalkers", 24, grid, start, random.Random(0)) == []

    grid, start = _maze(25)
    stalkers = place("stalkers", 25, grid, start, random.Random(0))
    assert len(stalkers) == 1
    assert manhattan(stalkers[0], start) > 10


def test_small_pool_places_what_it_can():
    # only (4, 4), (5, 3) and (5, 4) are further than 5 steps from the start
    rows = [
        "WWWWWWW",
        "WS WWWW",
        "W WWWWW",
        "W WWW W",
        "W     W",
        "WWWWWEW",
        "WWWWWWW",
    ]
    grid = Grid.from_rows(rows)
    enemies = place("enemies", 30, grid, (1, 1), random.Random(0))
    assert sorted(enemies) == [(4, 4), (5, 3), (5, 4)]


def test_odd_teleporter_pool_keeps_pairs():
    rows = [
        "WWWWWWW",
        "WS WWWW",
        "WWWWWWW",
        "WWWWWWW",
        "WWWWWWW",
        "WWW  EW",
        "WWWWWWW",
    ]
    grid = Grid.from_rows(rows)
    teleporters = place("teleporters", 24, grid, (1, 1), random.Random(0))
    assert len(teleporters) == 2


def test_unknown_kind_is_rejected():
    grid, start = _maze(1)
    with pytest.raises(ValueError):
        place("ghosts", 1, grid, start)


def test_spawn_all_keeps_teleporters_off_icons():
    for seed in range(5):
        grid, start = _maze(30, seed)
        layout = spawn_all(30, grid, start, random.Random(seed))
        assert len(layout.enemies) == 4
        assert len(layout.stalkers) == 1
        assert len(layout.teleporters) == 6
        assert len(layout.regenerate_icons) in (4, 5)
        assert not set(layout.teleporters) & set(layout.regenerate_icons)


def test_spawn_all_is_empty_on_level_one():
    grid, start = _maze(1)
    layout = spawn_all(1, grid, start, random.Random(0))
    assert layout.enemies == layout.stalkers == layout.teleporters == layout.regenerate_icons == []
