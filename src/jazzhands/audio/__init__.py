"""Sound cue playback."""
from .feedback import AudioConfig, AudioFeedback

__all__ = ["AudioConfig", "AudioFeedback"]
