"""Base class for audio players."""

from abc import ABC, abstractmethod

from ..core.rules import AudioCue

# Looping tracks; only one of them plays at a time
MUSIC_CUES: tuple[AudioCue, ...] = ("background", "infinite", "game-complete")
EFFECT_CUES: tuple[AudioCue, ...] = ("level-complete",)
ALL_CUES = MUSIC_CUES + EFFECT_CUES


class AudioPlayer(ABC):
    """Plays named cues for the game session."""

    @abstractmethod
    def play(self, cue: AudioCue) -> None:
        """Start a cue; music cues replace whichever music is playing."""
        raise NotImplementedError

    @abstractmethod
    def stop_all(self) -> None:
        """Stop every music cue."""
        raise NotImplementedError

    @abstractmethod
    def set_muted(self, muted: bool) -> None:
        raise NotImplementedError

    @property
    @abstractmethod
    def name(self) -> str:
        raise NotImplementedError
