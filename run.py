"""Maze Quest launcher

Runs the FastAPI service that drives the game session; the renderer
talks to it over HTTP.
"""

import logging
import os
import sys
import webbrowser
from pathlib import Path

import uvicorn
import yaml
from dotenv import load_dotenv

from mazequest.audio.player_base import AudioPlayer
from mazequest.audio.player_pygame import PygameMixerPlayer
from mazequest.audio.player_silent import SilentPlayer
from mazequest.core.scheduler import AsyncioScheduler
from mazequest.core.state import Settings
from mazequest.server.api import create_app
from mazequest.server.controller import build_controller

# environment overrides (MAZEQUEST_CONFIG, ...)
load_dotenv()


def load_config() -> dict:
    """Load config.yaml, or the file named by MAZEQUEST_CONFIG."""
    config_path = Path(os.getenv("MAZEQUEST_CONFIG", "config.yaml"))
    if not config_path.exists():
        print(f"Warning: {config_path} not found, using default config")
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        print(f"Warning: Failed to load config ({exc}), using default config")
        return {}


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_audio_player(settings: Settings) -> AudioPlayer:
    """Build the audio player; falls back to silence when unavailable."""
    if not settings.audio_enabled:
        print("Audio disabled in config")
        return SilentPlayer()

    player = PygameMixerPlayer(settings.audio_dir, volume=settings.audio_volume)
    if player.enabled:
        print(f"[OK] Audio: {player.name}")
        return player
    print("[!] pygame mixer unavailable, falling back to silent audio")
    return SilentPlayer()


def main():
    """Script entry point, starts the web service."""
    print("=" * 60)
    print("Maze Quest")
    print("=" * 60)
    print()

    print("Loading configuration...")
    config = load_config()
    settings = Settings()
    if config:
        settings.load_from_dict(config)
    configure_logging(settings)
    print("[OK] Configuration loaded")
    print()

    print("Initializing audio...")
    audio = create_audio_player(settings)
    print()

    controller = build_controller(
        settings=settings,
        scheduler=AsyncioScheduler(),
        audio=audio,
    )

    static_dir = Path(settings.static_root)
    if not static_dir.exists():
        print(f"[!] Static directory not found: {static_dir}")
        print("    Only the JSON API will be served.")

    app = create_app(controller, static_dir=static_dir if static_dir.exists() else None)

    url = f"http://{settings.server_host}:{settings.server_port}"
    print("=" * 60)
    print(f"Server running at: {url}")
    print(f"API docs: {url}/docs")
    print("=" * 60)
    print()

    if settings.auto_open_browser and static_dir.exists():
        try:
            webbrowser.open(url)
        except webbrowser.Error as exc:
            print(f"[!] Could not open browser: {exc}")

    config = uvicorn.Config(
        app,
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)
    try:
        server.run()
    except KeyboardInterrupt:
        print("\nServer interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
