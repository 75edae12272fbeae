"""
Audio feedback: fire-and-forget sound cues.

Every cue is its own pygame Sound; play() returns immediately and cues
overlap on separate mixer channels.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame  # noqa: E402

logger = logging.getLogger(__name__)

BEGIN_CUE = "begin"
FAIL_CUE = "fail"


def success_cue(gesture) -> str:
    return f"success:{gesture.label}"


@dataclass
class AudioConfig:
    """Audio cue configuration."""
    enabled: bool = True
    begin_sound: str = "sounds/charge.wav"
    fail_sound: str = "sounds/clarinetFail.wav"
    volume: float = 1.0
    channels: int = 16  # simultaneous cues

    @classmethod
    def from_dict(cls, config: dict) -> "AudioConfig":
        """Create config from dictionary."""
        return cls(
            enabled=config.get("enabled", True),
            begin_sound=config.get("begin_sound", "sounds/charge.wav"),
            fail_sound=config.get("fail_sound", "sounds/clarinetFail.wav"),
            volume=config.get("volume", 1.0),
            channels=config.get("channels", 16),
        )


class AudioFeedback:
    """
    Plays the begin, fail and per-gesture success cues.

    A cue whose file is missing or cannot be decoded stays silent; the
    failure is logged once at load time.

    Example:
        >>> audio = AudioFeedback(AudioConfig())
        >>> audio.load(catalog)
        >>> audio.play_begin()
        >>> audio.play_success(gesture)
    """

    def __init__(self, config: Optional[AudioConfig] = None, mixer=None):
        self.config = config or AudioConfig()
        self._mixer = mixer if mixer is not None else pygame.mixer
        self._sounds: Dict[str, object] = {}
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def cues(self):
        return sorted(self._sounds)

    def load(self, gestures: Iterable) -> bool:
        """Initialize the mixer and decode every cue.

        Args:
            gestures: catalog entries; each contributes its success sound

        Returns:
            True if the mixer is available (individual cues may still be silent)
        """
        if not self.config.enabled:
            logger.info("Audio feedback disabled")
            return False

        try:
            if not self._mixer.get_init():
                self._mixer.init()
            self._mixer.set_num_channels(self.config.channels)
        except pygame.error as e:
            logger.error("Audio mixer unavailable: %s", e)
            return False

        self._load_cue(BEGIN_CUE, self.config.begin_sound)
        self._load_cue(FAIL_CUE, self.config.fail_sound)
        for gesture in gestures:
            self._load_cue(success_cue(gesture), gesture.sound)

        self._ready = True
        logger.info("Loaded %d sound cues", len(self._sounds))
        return True

    def _load_cue(self, cue: str, path: str) -> None:
        if not os.path.isfile(path):
            logger.warning("Sound file for cue %r not found: %s", cue, path)
            return
        try:
            sound = self._mixer.Sound(path)
        except pygame.error as e:
            logger.warning("Could not decode %s for cue %r: %s", path, cue, e)
            return
        sound.set_volume(self.config.volume)
        self._sounds[cue] = sound

    def play(self, cue: str) -> bool:
        """Start a cue without waiting for it; returns False if it is silent."""
        sound = self._sounds.get(cue)
        if sound is None:
            logger.debug("No sound for cue %r", cue)
            return False
        sound.play()
        return True

    def play_begin(self) -> bool:
        return self.play(BEGIN_CUE)

    def play_fail(self) -> bool:
        return self.play(FAIL_CUE)

    def play_success(self, gesture) -> bool:
        return self.play(success_cue(gesture))

    def close(self) -> None:
        """Stop all cues and release the mixer."""
        if self._ready:
            self._mixer.stop()
            self._mixer.quit()
            self._ready = False
        self._sounds.clear()
