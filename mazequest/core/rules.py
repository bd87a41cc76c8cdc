"""Level progression rules

Maze sizes, unlock levels, entity counts, AI tick speeds and scoring.
"""

import math
from typing import Literal

# Game status values
GameStatus = Literal["start", "playing", "level-complete", "game-complete", "game-over"]

# Audio cue names
AudioCue = Literal["level-complete", "background", "infinite", "game-complete"]

FINAL_LEVEL = 30
BASE_MAZE_SIZE = 7

# Unlock levels for each entity kind
UNLOCK_LEVELS = {
    "regenerate_icons": 10,
    "enemies": 15,
    "teleporters": 20,
    "stalkers": 25,
}

MAX_ENEMIES = 4
MAX_TELEPORTERS = 14
STALKER_COUNT = 1

# Manhattan distance gates used when sampling spawn cells
ENEMY_MIN_START_DISTANCE = 5
ICON_MIN_DISTANCE = 8
STALKER_MIN_START_DISTANCE = 10

# Seconds
TIMER_INTERVAL = 1.0
LEVEL_ADVANCE_DELAY = 2.0
HIT_RECOVERY_DELAY = 0.4

# Scoring
TIME_BONUS_MAX = 1000
TIME_BONUS_PENALTY = 10
LEVEL_SCORE = 500

# Wall/path colour schemes, picked at random on every level load
COLOR_SCHEMES = {
    "gray": ((31, 41, 55), (51, 65, 85)),
    "sky": ((12, 74, 110), (7, 89, 133)),
    "indigo": ((49, 46, 129), (55, 48, 163)),
    "purple": ((88, 28, 135), (107, 33, 168)),
    "stone": ((41, 37, 36), (68, 64, 60)),
    "emerald": ((6, 78, 59), (6, 95, 70)),
    "teal": ((19, 78, 74), (17, 94, 89)),
    "lime": ((54, 83, 20), (63, 98, 18)),
    "amber": ((146, 64, 14), (180, 83, 9)),
    "pink": ((131, 24, 67), (157, 23, 77)),
    "rose": ((136, 19, 55), (159, 18, 57)),
    "cyan": ((22, 78, 99), (21, 94, 117)),
}


def size_level(level: int) -> int:
    """Level used for maze dimensions (infinite mode keeps the final size)."""
    return min(level, FINAL_LEVEL)


def maze_size(level: int) -> int:
    """Side length of the square maze for a level.

    Args:
        level: current level (>= 1)

    Returns:
        odd size, 7 at level 1 and 65 from level 30 on
    """
    return BASE_MAZE_SIZE + 2 * (size_level(level) - 1)


def wall_removal_attempts(size: int, level: int) -> int:
    """Number of random wall knock-down attempts after carving."""
    return math.floor(size * level * 0.2)


def is_unlocked(kind: str, level: int) -> bool:
    return level >= UNLOCK_LEVELS[kind]


def enemy_count(level: int) -> int:
    if not is_unlocked("enemies", level):
        return 0
    return min(MAX_ENEMIES, (level - UNLOCK_LEVELS["enemies"]) // 2 + 1)


def teleporter_count(level: int) -> int:
    """Teleporters come in pairs, so the count is always even."""
    if not is_unlocked("teleporters", level):
        return 0
    return min(MAX_TELEPORTERS, 2 + (level - UNLOCK_LEVELS["teleporters"]) // 4 * 2)


def stalker_count(level: int) -> int:
    return STALKER_COUNT if is_unlocked("stalkers", level) else 0


def enemy_interval_ms(level: int) -> int:
    """Enemy tick period, faster at higher levels."""
    return max(300, 800 - (level - 10) * 10)


def stalker_interval_ms(level: int) -> int:
    """Stalker tick period, faster at higher levels."""
    return max(400, 900 - (level - 10) * 10)


def time_bonus(timer: int) -> int:
    return max(0, TIME_BONUS_MAX - timer * TIME_BONUS_PENALTY)


def exit_score(timer: int, level: int) -> int:
    """Points awarded for reaching the exit.

    Args:
        timer: elapsed whole seconds on the level
        level: level that was completed

    Returns:
        time bonus plus the per-level reward
    """
    return time_bonus(timer) + LEVEL_SCORE * level


def can_skip(level: int, status: str) -> bool:
    """Skipping is refused on level 29 so the final level is always played."""
    return status == "playing" and level != FINAL_LEVEL - 1


def music_cue(level: int) -> AudioCue:
    return "infinite" if level > FINAL_LEVEL else "background"
