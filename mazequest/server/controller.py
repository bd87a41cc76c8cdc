"""Game backend controller.

Wraps the game session and exposes JSON-ready payloads for the API.
"""

from __future__ import annotations

import logging
import random
from typing import Optional

from ..audio.player_base import AudioPlayer
from ..core.models import GameSnapshot
from ..core.scheduler import Scheduler
from ..core.session import GameSession
from ..core.state import Settings

logger = logging.getLogger(__name__)


class GameController:
    """Wrap game flow and provide data to the web layer."""

    def __init__(self, *, settings: Settings, session: GameSession) -> None:
        self.settings = settings
        self.session = session
        self._latest: GameSnapshot = session.snapshot()
        self._unsubscribe = session.subscribe(self._on_snapshot)

    def _on_snapshot(self, snapshot: GameSnapshot) -> None:
        self._latest = snapshot

    def close(self) -> None:
        """Stop all timers and detach from the session."""
        self._unsubscribe()
        self.session.restart_game()

    # ------------------------------------------------------------------
    # Public accessors
    # ------------------------------------------------------------------
    def get_state_payload(self) -> dict:
        """State payload for HUD/UI."""
        payload = self._latest.session.model_dump()
        payload["revision"] = self._latest.revision
        payload["audio"] = self.session.audio.name
        return payload

    def get_maze_payload(self) -> dict:
        """Serialized maze and entities for the renderer."""
        payload = self._latest.maze.model_dump()
        payload["revision"] = self._latest.revision
        return payload

    def get_snapshot_payload(self) -> dict:
        return {"state": self.get_state_payload(), "maze": self.get_maze_payload()}

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def start_game(self) -> dict:
        self.session.start_game()
        return self.get_snapshot_payload()

    def restart_game(self) -> dict:
        self.session.restart_game()
        return self.get_snapshot_payload()

    def continue_to_infinite(self) -> dict:
        if not self.session.continue_to_infinite():
            raise ValueError("the game is not complete")
        return self.get_snapshot_payload()

    def skip_level(self) -> dict:
        skipped = self.session.skip_level()
        payload = self.get_snapshot_payload()
        payload["skipped"] = skipped
        return payload

    def move_player(self, dx: int, dy: int) -> dict:
        """Attempt to move player; invalid moves are reported, not raised."""
        moved = self.session.move_player(dx, dy)
        state = self.get_state_payload()
        return {
            "valid": moved,
            "position": state["player"],
            "status": state["status"],
            "state": state,
        }

    def toggle_mute(self) -> dict:
        return {"muted": self.session.toggle_mute()}

    def toggle_minimap(self) -> dict:
        return {"show_minimap": self.session.toggle_minimap()}


def build_controller(
    *,
    settings: Settings,
    scheduler: Scheduler,
    audio: Optional[AudioPlayer] = None,
) -> GameController:
    """Factory to build GameController."""
    rng = random.Random(settings.seed)
    if settings.seed is not None:
        logger.info("using fixed random seed %s", settings.seed)
    session = GameSession(scheduler=scheduler, audio=audio, rng=rng)
    return GameController(settings=settings, session=session)
