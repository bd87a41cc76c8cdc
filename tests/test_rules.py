"""Tests for level rules and scoring."""

import pytest

from mazequest.core import rules


def test_score_at_zero_seconds_on_level_one():
    assert rules.exit_score(0, 1) == 1500


def test_time_bonus_clamps_after_one_hundred_seconds():
    assert rules.time_bonus(99) == 10
    assert rules.time_bonus(100) == 0
    assert rules.exit_score(150, 3) == 500 * 3


@pytest.mark.parametrize(
    "level, status, allowed",
    [
        (28, "playing", True),
        (29, "playing", False),
        (30, "playing", True),
        (5, "level-complete", False),
        (5, "start", False),
        (40, "playing", True),
    ],
)
def test_skip_rules(level, status, allowed):
    assert rules.can_skip(level, status) is allowed


@pytest.mark.parametrize(
    "level, expected",
    [(1, 890), (10, 800), (15, 750), (40, 500), (60, 300), (100, 300)],
)
def test_enemy_interval(level, expected):
    assert rules.enemy_interval_ms(level) == expected


@pytest.mark.parametrize("level, expected", [(25, 750), (40, 600), (60, 400), (90, 400)])
def test_stalker_interval(level, expected):
    assert rules.stalker_interval_ms(level) == expected


@pytest.mark.parametrize(
    "level, expected",
    [(14, 0), (15, 1), (16, 1), (17, 2), (19, 3), (21, 4), (30, 4)],
)
def test_enemy_count(level, expected):
    assert rules.enemy_count(level) == expected


@pytest.mark.parametrize(
    "level, expected",
    [(19, 0), (20, 2), (23, 2), (24, 4), (28, 6), (44, 14), (60, 14)],
)
def test_teleporter_count_is_even(level, expected):
    count = rules.teleporter_count(level)
    assert count == expected
    assert count % 2 == 0


def test_stalkers_unlock_at_twenty_five():
    assert rules.stalker_count(24) == 0
    assert rules.stalker_count(25) == 1


def test_music_cue_switches_in_infinite_mode():
    assert rules.music_cue(30) == "background"
    assert rules.music_cue(31) == "infinite"


def test_wall_removal_attempts():
    assert rules.wall_removal_attempts(7, 1) == 1
    assert rules.wall_removal_attempts(65, 30) == 390
