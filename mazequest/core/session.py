"""Game session

Level lifecycle, scoring, AI ticks and move resolution for a single
player. Every public operation and every scheduled callback runs as one
atomic step under the session lock; observers are notified after the
step completes.
"""

from __future__ import annotations

import logging
import random
import threading
from typing import Callable, List, Optional

from ..audio.player_base import AudioPlayer
from ..audio.player_silent import SilentPlayer
from .maze import DIRECTIONS, Grid, generate_maze, regenerate_around
from .models import GameSnapshot, MazeSnapshot, Palette, Position, SessionSnapshot, positions
from .placement import EntityLayout, spawn_all
from .pursuit import move_enemies, move_stalkers
from .resolver import resolve_interaction
from .rules import (
    COLOR_SCHEMES,
    FINAL_LEVEL,
    HIT_RECOVERY_DELAY,
    LEVEL_ADVANCE_DELAY,
    TIMER_INTERVAL,
    AudioCue,
    can_skip,
    enemy_interval_ms,
    exit_score,
    is_unlocked,
    music_cue,
    stalker_interval_ms,
)
from .scheduler import Deferred, Scheduler, TickerSet
from .state import GameState

logger = logging.getLogger(__name__)

Observer = Callable[[GameSnapshot], None]

UNIT_STEPS = frozenset(DIRECTIONS.values())


class GameSession:
    """Owns the maze, the entities and the timers of one game."""

    def __init__(
        self,
        *,
        scheduler: Scheduler,
        audio: Optional[AudioPlayer] = None,
        rng: Optional[random.Random] = None,
        state: Optional[GameState] = None,
    ) -> None:
        self.scheduler = scheduler
        self.audio = audio or SilentPlayer()
        self.rng = rng or random.Random()
        self.state = state or GameState()

        # level 1 preview until the game starts
        self.grid: Grid = generate_maze(self.state.level, self.rng)
        self.layout = EntityLayout()
        self.revision = 0

        self._lock = threading.RLock()
        self._observers: List[Observer] = []
        self._tickers = TickerSet(scheduler)
        self._level_advance = Deferred(scheduler, "level-advance")
        self._hit_recovery = Deferred(scheduler, "hit-recovery")

        self._set_audio_muted(self.state.muted)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register a render callback; returns an unsubscribe function."""
        with self._lock:
            self._observers.append(observer)

        def unsubscribe() -> None:
            with self._lock:
                if observer in self._observers:
                    self._observers.remove(observer)

        return unsubscribe

    def snapshot(self) -> GameSnapshot:
        with self._lock:
            return self._build_snapshot()

    def running_tasks(self) -> list[str]:
        """Names of the active tickers and pending one-shot tasks."""
        with self._lock:
            names = self._tickers.running()
            names.extend(d.name for d in (self._level_advance, self._hit_recovery) if d.pending)
            return names

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start_game(self) -> None:
        with self._lock:
            self._cancel_all()
            self.state.level = 1
            self.state.score = 0
            self.state.status = "playing"
            self.state.muted = False
            self._set_audio_muted(False)
            self._load_level(self.state.level)
            self._start_tasks()
            logger.info("game started")
        self._publish()

    def skip_level(self) -> bool:
        """Jump straight to the next level; refused on level 29."""
        with self._lock:
            if not can_skip(self.state.level, self.state.status):
                return False
            self._level_advance.cancel()
            self._tickers.stop_all()
            self.state.level += 1
            self._load_level(self.state.level)
            self._start_tasks()
            logger.info("skipped to level %s", self.state.level)
        self._publish()
        return True

    def continue_to_infinite(self) -> bool:
        """Keep playing past the final level."""
        with self._lock:
            if self.state.status != "game-complete":
                return False
            self.state.level += 1
            self._load_level(self.state.level)
            self.state.status = "playing"
            self._start_tasks()
            logger.info("continuing to infinite mode, level %s", self.state.level)
        self._publish()
        return True

    def restart_game(self) -> None:
        with self._lock:
            self._cancel_all()
            self._stop_music()
            self.state.reset()
            self._set_audio_muted(True)
            logger.info("game restarted")
        self._publish()

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def move_player(self, dx: int, dy: int) -> bool:
        """Apply a move intent.

        Args:
            dx, dy: unit cardinal step

        Returns:
            True if the player moved; walls, bounds, pauses and a
            pending hit recovery silently discard the move

        Raises:
            ValueError: (dx, dy) is not a unit cardinal step
        """
        if (dx, dy) not in UNIT_STEPS:
            raise ValueError(f"invalid move vector: ({dx}, {dy})")

        with self._lock:
            if not self.state.accepts_moves:
                return False
            x, y = self.state.player_position
            target = (x + dx, y + dy)
            if not self.grid.is_open(*target):
                return False

            self.state.player_position = target
            if target not in self.layout.teleporters:
                self.state.can_teleport = True
            self._check_game_state()
        self._publish()
        return True

    def toggle_mute(self) -> bool:
        with self._lock:
            muted = not self.state.muted
            self.state.muted = muted
            self._set_audio_muted(muted)
            if muted:
                self._stop_music()
            elif self.state.is_playing:
                self._play_level_music()
            elif self.state.is_finished:
                self._play("game-complete")
        self._publish()
        return muted

    def toggle_minimap(self) -> bool:
        with self._lock:
            self.state.show_minimap = not self.state.show_minimap
            shown = self.state.show_minimap
        self._publish()
        return shown

    # ------------------------------------------------------------------
    # Interaction chain
    # ------------------------------------------------------------------
    def _check_game_state(self) -> None:
        if not self.state.accepts_moves:
            return

        on_teleporter = (
            self.state.can_teleport and self.state.player_position in self.layout.teleporters
        )
        interaction = resolve_interaction(
            self.state.player_position,
            self.grid,
            self.layout,
            self.state.can_teleport,
        )
        # stepping on a live teleporter spends it, even an unpaired one
        if on_teleporter:
            self.state.can_teleport = False

        if interaction.kind == "caught":
            self._game_over()
        elif interaction.kind == "teleport":
            self.state.player_position = interaction.destination
        elif interaction.kind == "regenerate":
            self._regenerate()
        elif interaction.kind == "exit":
            self._complete_level()
        elif interaction.kind == "hit":
            self._player_hit()

    def _complete_level(self) -> None:
        self._play("level-complete")
        points = exit_score(self.state.timer, self.state.level)
        self.state.add_score(points)
        logger.info(
            "level %s complete in %ss, +%s (score %s)",
            self.state.level, self.state.timer, points, self.state.score,
        )

        if self.state.level == FINAL_LEVEL:
            self._cancel_all()
            self.state.status = "game-complete"
            self._stop_music()
            self._play("game-complete")
            return

        self.state.status = "level-complete"
        self._tickers.stop_all()
        self._level_advance.schedule(LEVEL_ADVANCE_DELAY, self._on_level_advance)

    def _game_over(self) -> None:
        self.state.status = "game-over"
        self._cancel_all()
        self._stop_music()
        self._play("game-complete")
        logger.info("caught by a stalker on level %s (score %s)", self.state.level, self.state.score)

    def _player_hit(self) -> None:
        self.state.player_hit = True
        self._hit_recovery.schedule(HIT_RECOVERY_DELAY, self._on_hit_recovered)

    def _regenerate(self) -> None:
        anchor = self.state.player_position
        self.grid = regenerate_around(self.state.level, anchor, self.rng)
        self.state.start_position = anchor
        self.layout = spawn_all(self.state.level, self.grid, anchor, self.rng)
        # AI restarts against the new maze; the level clock keeps running
        self._start_tasks(reset_timer=False)
        logger.info("maze regenerated around %s on level %s", anchor, self.state.level)

    # ------------------------------------------------------------------
    # Level loading and tasks
    # ------------------------------------------------------------------
    def _load_level(self, level: int) -> None:
        self._cancel_hit_recovery()
        self.state.palette = self.rng.choice(sorted(COLOR_SCHEMES))
        self.grid = generate_maze(level, self.rng)
        self.state.can_teleport = True
        start = self.grid.start_position
        self.state.start_position = start
        self.state.player_position = start
        self.layout = spawn_all(level, self.grid, start, self.rng)
        self._play_level_music()
        logger.info("level %s loaded (%sx%s)", level, self.grid.size, self.grid.size)

    def _start_tasks(self, reset_timer: bool = True) -> None:
        self._tickers.stop_all()
        level = self.state.level
        if reset_timer:
            self.state.timer = 0
        self._tickers.start("timer", TIMER_INTERVAL, self._on_timer_tick)
        self._tickers.start("enemies", enemy_interval_ms(level) / 1000, self._on_enemy_tick)
        if is_unlocked("stalkers", level):
            self._tickers.start("stalkers", stalker_interval_ms(level) / 1000, self._on_stalker_tick)
        logger.debug(
            "tasks for level %s: %s",
            level, {name: self._tickers.interval(name) for name in self._tickers.running()},
        )

    def _cancel_hit_recovery(self) -> None:
        self._hit_recovery.cancel()
        self.state.player_hit = False

    def _cancel_all(self) -> None:
        self._tickers.stop_all()
        self._level_advance.cancel()
        self._cancel_hit_recovery()

    # ------------------------------------------------------------------
    # Scheduled callbacks
    # ------------------------------------------------------------------
    def _on_timer_tick(self) -> None:
        with self._lock:
            if not self.state.is_playing:
                return
            self.state.timer += 1
            logger.debug("timer %ss on level %s", self.state.timer, self.state.level)
        self._publish()

    def _on_enemy_tick(self) -> None:
        with self._lock:
            if not self.state.is_playing:
                return
            self.layout.enemies = move_enemies(
                self.grid, self.layout.enemies, self.state.player_position, self.rng
            )
            logger.debug("enemies moved to %s", self.layout.enemies)
            self._check_game_state()
        self._publish()

    def _on_stalker_tick(self) -> None:
        with self._lock:
            if not self.state.is_playing or not self.layout.stalkers:
                return
            self.layout.stalkers = move_stalkers(
                self.grid, self.layout.stalkers, self.state.player_position
            )
            logger.debug("stalkers moved to %s", self.layout.stalkers)
            self._check_game_state()
        self._publish()

    def _on_level_advance(self) -> None:
        with self._lock:
            if self.state.status != "level-complete":
                return
            self.state.level += 1
            self._load_level(self.state.level)
            self.state.status = "playing"
            self._start_tasks()
        self._publish()

    def _on_hit_recovered(self) -> None:
        with self._lock:
            self.state.player_position = self.state.start_position
            self.state.player_hit = False
        self._publish()

    # ------------------------------------------------------------------
    # Audio
    # ------------------------------------------------------------------
    def _play(self, cue: AudioCue) -> None:
        if self.state.muted:
            return
        try:
            self.audio.play(cue)
        except Exception as exc:
            logger.warning("audio cue %r failed: %s", cue, exc)

    def _play_level_music(self) -> None:
        self._stop_music()
        self._play(music_cue(self.state.level))

    def _stop_music(self) -> None:
        try:
            self.audio.stop_all()
        except Exception as exc:
            logger.warning("stopping audio failed: %s", exc)

    def _set_audio_muted(self, muted: bool) -> None:
        try:
            self.audio.set_muted(muted)
        except Exception as exc:
            logger.warning("muting audio failed: %s", exc)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------
    def _build_snapshot(self) -> GameSnapshot:
        state = self.state
        session = SessionSnapshot(
            level=state.level,
            score=state.score,
            timer=state.timer,
            status=state.status,
            infinite=state.level > FINAL_LEVEL,
            player=Position.of(state.player_position),
            player_hit=state.player_hit,
            can_teleport=state.can_teleport,
            muted=state.muted,
            show_minimap=state.show_minimap,
        )
        maze = MazeSnapshot(
            size=self.grid.size,
            rows=self.grid.to_rows(),
            start=Position.of(state.start_position),
            exit=Position.of(self.grid.exit_position),
            enemies=positions(self.layout.enemies),
            stalkers=positions(self.layout.stalkers),
            teleporters=positions(self.layout.teleporters),
            regenerate_icons=positions(self.layout.regenerate_icons),
            palette=Palette.named(state.palette),
        )
        return GameSnapshot(revision=self.revision, session=session, maze=maze)

    def _publish(self) -> None:
        with self._lock:
            self.revision += 1
            snapshot = self._build_snapshot()
            observers = list(self._observers)
        for observer in observers:
            try:
                observer(snapshot)
            except Exception:
                logger.exception("observer %r failed", observer)
