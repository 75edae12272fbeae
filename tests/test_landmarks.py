"""
Tests for hand landmark types and the shared snapshot
=====================================================
"""

import pytest

from jazzhands.detection.landmarks import (
    HAND_CONNECTIONS,
    NUM_LANDMARKS,
    HandLandmarks,
    Landmark,
    LandmarkIndex,
)
from jazzhands.game.snapshot import HandSnapshot

from conftest import make_hand


class TestHandLandmarks:
    """Test suite for HandLandmarks."""

    def test_indexing(self):
        hand = make_hand(wrist=(0.1, 0.2, 0.0))

        assert len(hand) == NUM_LANDMARKS
        assert hand.landmarks[LandmarkIndex.WRIST] == Landmark(0.1, 0.2, 0.0)

    def test_pixels(self):
        hand = HandLandmarks(landmarks=(Landmark(0.5, 0.25, 0.0),))

        assert hand.pixels(640, 480) == [(320, 120)]

    def test_immutable(self):
        hand = make_hand()

        with pytest.raises(AttributeError):
            hand.handedness = "Left"

    def test_connections_reference_valid_landmarks(self):
        for start, end in HAND_CONNECTIONS:
            assert 0 <= start < NUM_LANDMARKS
            assert 0 <= end < NUM_LANDMARKS


class TestHandSnapshot:
    """Test suite for HandSnapshot."""

    def test_starts_empty(self):
        snapshot = HandSnapshot()

        assert snapshot.latest() == ()

    def test_replace_is_wholesale(self):
        snapshot = HandSnapshot()
        first, second = make_hand(), make_hand(wrist=(0.1, 0.1, 0.0))
        hands = [first, second]

        snapshot.replace(hands)
        held = snapshot.latest()
        hands.clear()

        assert held == (first, second)
        assert snapshot.latest() == (first, second)

        snapshot.replace([second])
        assert held == (first, second)
        assert snapshot.latest() == (second,)

