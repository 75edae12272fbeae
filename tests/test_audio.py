"""
Tests for Audio Feedback
========================
"""

from unittest.mock import MagicMock

import pytest

pygame = pytest.importorskip("pygame")

from jazzhands.audio.feedback import (
    BEGIN_CUE,
    FAIL_CUE,
    AudioConfig,
    AudioFeedback,
    success_cue,
)
from jazzhands.game.catalog import Gesture


@pytest.fixture
def mixer():
    mock = MagicMock()
    mock.get_init.return_value = None
    return mock


@pytest.fixture
def sound_dir(tmp_path):
    for name in ("charge.wav", "fail.wav", "bonk.wav"):
        (tmp_path / name).write_bytes(b"RIFF")
    return tmp_path


def make_config(sound_dir, **kwargs):
    return AudioConfig(
        begin_sound=str(sound_dir / "charge.wav"),
        fail_sound=str(sound_dir / "fail.wav"),
        **kwargs,
    )


class TestAudioConfig:
    """Test suite for AudioConfig."""

    def test_from_dict(self):
        config = AudioConfig.from_dict({"volume": 0.5, "enabled": False})

        assert config.volume == 0.5
        assert not config.enabled
        assert config.fail_sound == "sounds/clarinetFail.wav"


class TestAudioFeedback:
    """Test suite for AudioFeedback."""

    def test_load_creates_one_sound_per_cue(self, mixer, sound_dir):
        audio = AudioFeedback(make_config(sound_dir, volume=0.8), mixer=mixer)
        fist = Gesture("fist", "👊", str(sound_dir / "bonk.wav"))

        assert audio.load([fist]) is True

        mixer.init.assert_called_once()
        mixer.set_num_channels.assert_called_once_with(16)
        assert audio.cues == sorted([BEGIN_CUE, FAIL_CUE, success_cue(fist)])
        mixer.Sound.return_value.set_volume.assert_called_with(0.8)

    def test_missing_file_is_silent(self, mixer, sound_dir):
        audio = AudioFeedback(make_config(sound_dir), mixer=mixer)
        peace = Gesture("Peace", "✌️", str(sound_dir / "missing.wav"))

        audio.load([peace])

        assert success_cue(peace) not in audio.cues
        assert audio.play_success(peace) is False

    def test_undecodable_file_is_silent(self, mixer, sound_dir):
        mixer.Sound.side_effect = pygame.error("bad file")
        audio = AudioFeedback(make_config(sound_dir), mixer=mixer)

        assert audio.load([]) is True
        assert audio.cues == []
        assert audio.play_fail() is False

    def test_play_is_fire_and_forget(self, mixer, sound_dir):
        begin, fail, bonk = MagicMock(), MagicMock(), MagicMock()
        mixer.Sound.side_effect = [begin, fail, bonk]
        audio = AudioFeedback(make_config(sound_dir), mixer=mixer)
        fist = Gesture("fist", "👊", str(sound_dir / "bonk.wav"))
        audio.load([fist])

        assert audio.play_begin()
        assert audio.play_success(fist)
        assert audio.play_fail()

        begin.play.assert_called_once_with()
        bonk.play.assert_called_once_with()
        fail.play.assert_called_once_with()

    def test_disabled(self, mixer, sound_dir):
        audio = AudioFeedback(make_config(sound_dir, enabled=False), mixer=mixer)

        assert audio.load([]) is False
        mixer.init.assert_not_called()
        assert audio.play_begin() is False

    def test_mixer_unavailable(self, mixer, sound_dir):
        mixer.init.side_effect = pygame.error("no audio device")
        audio = AudioFeedback(make_config(sound_dir), mixer=mixer)

        assert audio.load([]) is False
        assert not audio.is_ready

    def test_close(self, mixer, sound_dir):
        audio = AudioFeedback(make_config(sound_dir), mixer=mixer)
        audio.load([])

        audio.close()

        mixer.quit.assert_called_once()
        assert audio.cues == []
        assert not audio.is_ready
