"""Silent audio player

Records requested cues without producing sound. Used when audio is
disabled or the mixer is unavailable, and by the tests. Only the most
recent cues are kept.
"""

from collections import deque
from typing import Deque, Optional

from .player_base import MUSIC_CUES, AudioPlayer
from ..core.rules import AudioCue

HISTORY_SIZE = 64


class SilentPlayer(AudioPlayer):
    def __init__(self, history: int = HISTORY_SIZE):
        self.played: Deque[AudioCue] = deque(maxlen=history)
        self.current_music: Optional[AudioCue] = None
        self.muted = True
        self.stop_count = 0

    @property
    def name(self) -> str:
        return "Silent Player"

    def play(self, cue: AudioCue) -> None:
        self.played.append(cue)
        if cue in MUSIC_CUES:
            self.current_music = cue

    def stop_all(self) -> None:
        self.current_music = None
        self.stop_count += 1

    def set_muted(self, muted: bool) -> None:
        self.muted = muted
