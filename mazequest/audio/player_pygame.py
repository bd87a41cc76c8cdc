"""pygame mixer audio player

Loads one sound file per cue from an assets directory
(``background.ogg``, ``level-complete.wav``, ...). Cues without a file
are skipped; a mixer that cannot start leaves the player disabled.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import pygame

from .player_base import ALL_CUES, MUSIC_CUES, AudioPlayer
from ..core.rules import AudioCue

logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS = (".ogg", ".wav", ".mp3")


class PygameMixerPlayer(AudioPlayer):
    def __init__(self, assets_dir: Path | str, volume: float = 0.6) -> None:
        self.assets_dir = Path(assets_dir)
        self.volume = max(0.0, min(float(volume), 1.0))
        self.muted = True
        self._sounds: Dict[str, pygame.mixer.Sound] = {}
        self.enabled = self._init_mixer()
        if self.enabled:
            self._load_sounds()

    @property
    def name(self) -> str:
        if self.enabled:
            return f"pygame mixer ({len(self._sounds)}/{len(ALL_CUES)} cues)"
        return "pygame mixer (disabled)"

    def _init_mixer(self) -> bool:
        """Initialize pygame mixer; return False if unavailable."""
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            return True
        except pygame.error as exc:
            logger.warning("pygame mixer disabled: %s", exc)
            return False

    def _find_file(self, cue: str) -> Optional[Path]:
        for ext in AUDIO_EXTENSIONS:
            path = self.assets_dir / f"{cue}{ext}"
            if path.exists():
                return path
        return None

    def _load_sounds(self) -> None:
        for cue in ALL_CUES:
            path = self._find_file(cue)
            if path is None:
                logger.info("no audio file for cue %r in %s", cue, self.assets_dir)
                continue
            try:
                sound = pygame.mixer.Sound(str(path))
            except pygame.error as exc:
                logger.warning("failed to load %s: %s", path, exc)
                continue
            sound.set_volume(0.0 if self.muted else self.volume)
            self._sounds[cue] = sound

    def play(self, cue: AudioCue) -> None:
        if not self.enabled or self.muted:
            return
        sound = self._sounds.get(cue)
        if sound is None:
            logger.debug("cue %r has no sound loaded", cue)
            return
        if cue in MUSIC_CUES:
            self.stop_all()
            sound.play(loops=-1)
        else:
            sound.stop()
            sound.play()

    def stop_all(self) -> None:
        for cue in MUSIC_CUES:
            sound = self._sounds.get(cue)
            if sound is not None:
                sound.stop()

    def set_muted(self, muted: bool) -> None:
        self.muted = muted
        for sound in self._sounds.values():
            sound.set_volume(0.0 if muted else self.volume)
