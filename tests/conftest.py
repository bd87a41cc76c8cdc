"""Shared fixtures for the game core tests.

Sessions run on a ManualScheduler so timers only fire when a test
advances the virtual clock.
"""

import random

import pytest

from mazequest.audio.player_silent import SilentPlayer
from mazequest.core.maze import Grid
from mazequest.core.placement import EntityLayout
from mazequest.core.scheduler import ManualScheduler
from mazequest.core.session import GameSession


# 7x7 room: walls only on the border
OPEN_ROOM = [
    "WWWWWWW",
    "WS    W",
    "W     W",
    "W     W",
    "W     W",
    "W    EW",
    "WWWWWWW",
]


def _open_grid(size: int) -> Grid:
    """Border walls around an empty floor."""
    rows = []
    for y in range(size):
        if y in (0, size - 1):
            rows.append("W" * size)
        else:
            rows.append("W" + " " * (size - 2) + "W")
    return Grid.from_rows(rows)


@pytest.fixture
def open_grid():
    return _open_grid


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def audio():
    return SilentPlayer()


@pytest.fixture
def session(scheduler, audio, rng):
    return GameSession(scheduler=scheduler, audio=audio, rng=rng)


@pytest.fixture
def room():
    return list(OPEN_ROOM)


@pytest.fixture
def install():
    """Swap in a hand-made maze and entity layout on a session."""

    def _install(session, rows, player=None, **entities):
        session.grid = Grid.from_rows(rows)
        session.layout = EntityLayout(**entities)
        start = session.grid.start_position
        session.state.start_position = start
        session.state.player_position = player or start
        session.state.can_teleport = True

    return _install


@pytest.fixture
def advance_to_level():
    """Skip forward from a started game to the given level."""

    def _advance(session, level):
        while session.state.level < level:
            assert session.skip_level()

    return _advance


@pytest.fixture
def pending():
    """Count the callbacks still live on a ManualScheduler."""

    def _pending(scheduler):
        return sum(1 for _, _, handle in scheduler._queue if not handle.cancelled)

    return _pending
