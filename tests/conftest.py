"""
Shared test helpers: synthetic hands and fake collaborators.
"""

import asyncio
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from jazzhands.detection.landmarks import HandLandmarks, Landmark
from jazzhands.game.catalog import Gesture, GestureCatalog
from jazzhands.recognition.types import Prediction


def make_hand(wrist=(0.5, 0.5, 0.0), num_landmarks=21, spread=0.01) -> HandLandmarks:
    """Create a hand whose landmarks fan out from the wrist."""
    wx, wy, wz = wrist
    landmarks = [Landmark(x=wx, y=wy, z=wz)]
    for i in range(1, num_landmarks):
        landmarks.append(Landmark(x=wx + i * spread, y=wy - i * spread, z=wz + i * spread / 10))
    return HandLandmarks(landmarks=tuple(landmarks), confidence=0.9)


class FakeClassifier:
    """Async classifier double returning canned predictions."""

    def __init__(self, predictions=None, load_ok=True, ready=True):
        self.predictions = list(predictions or [])
        self.load_ok = load_ok
        self.is_ready = ready
        self.labels = [p.label for p in self.predictions]
        self.calls = []
        self.load_calls = 0
        self.gate = None  # asyncio.Event holding classify() open

    async def load(self):
        self.load_calls += 1
        self.is_ready = self.load_ok
        return self.load_ok

    async def classify(self, features):
        self.calls.append(features)
        if self.gate is not None:
            await self.gate.wait()
        return list(self.predictions)


class FakeAudio:
    """Records every cue instead of playing it."""

    def __init__(self):
        self.played = []
        self.is_ready = False
        self.closed = False

    def load(self, gestures):
        self.is_ready = True
        return True

    def play_begin(self):
        self.played.append("begin")
        return True

    def play_fail(self):
        self.played.append("fail")
        return True

    def play_success(self, gesture):
        self.played.append(f"success:{gesture.label}")
        return True

    def close(self):
        self.closed = True


def predictions(*pairs):
    return [Prediction(label, conf) for label, conf in pairs]


@pytest.fixture
def fist_catalog():
    return GestureCatalog([Gesture(label="fist", glyph="👊", sound="sounds/bonk.wav")])


@pytest.fixture
def default_catalog():
    return GestureCatalog.default()


@pytest.fixture
def fake_audio():
    return FakeAudio()


def run(coro):
    """Run a coroutine on a fresh event loop."""
    return asyncio.run(coro)
