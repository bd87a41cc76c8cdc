"""Global game state management."""

from typing import Optional

from .maze import Position
from .rules import GameStatus


class GameState:
    """Holds the mutable session state of one playthrough."""

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        """Back to the values of a freshly opened game."""
        self.level = 1
        self.score = 0
        self.timer = 0
        self.status: GameStatus = "start"
        self.player_hit = False
        self.can_teleport = True
        self.player_position: Position = (1, 1)
        self.start_position: Position = (1, 1)
        self.palette = "gray"

        # UI-only flags
        self.muted = True
        self.show_minimap = False

    @property
    def is_playing(self) -> bool:
        return self.status == "playing"

    @property
    def is_finished(self) -> bool:
        return self.status in ("game-complete", "game-over")

    @property
    def accepts_moves(self) -> bool:
        return self.is_playing and not self.player_hit

    def add_score(self, points: int) -> None:
        if points < 0:
            raise ValueError("score never decreases")
        self.score += points


class Settings:
    """Game settings."""

    def __init__(self):
        self.title = "Maze Quest"

        # Game
        self.seed: Optional[int] = None

        # Audio
        self.audio_enabled = True
        self.audio_dir = "./assets/audio"
        self.audio_volume = 0.6

        # Logging
        self.log_level = "INFO"

        # Web server
        self.server_host = "127.0.0.1"
        self.server_port = 8000
        self.auto_open_browser = False
        self.static_root = "./web"

    def load_from_dict(self, config: dict) -> None:
        if "game" in config:
            g = config["game"] or {}
            self.title = g.get("title", self.title)
            self.seed = g.get("seed", self.seed)

        if "audio" in config:
            a = config["audio"] or {}
            self.audio_enabled = a.get("enabled", self.audio_enabled)
            self.audio_dir = a.get("assets_dir", self.audio_dir)
            self.audio_volume = float(a.get("volume", self.audio_volume))

        if "logging" in config:
            lg = config["logging"] or {}
            self.log_level = str(lg.get("level", self.log_level)).upper()

        if "server" in config:
            srv = config["server"] or {}
            self.server_host = srv.get("host", self.server_host)
            self.server_port = srv.get("port", self.server_port)
            self.auto_open_browser = srv.get("auto_open_browser", self.auto_open_browser)
            self.static_root = srv.get("static_root", self.static_root)
