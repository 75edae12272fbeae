"""Gesture recognition module."""
from .normalizer import normalize_hand, normalize_snapshot
from .types import Prediction

__all__ = [
    "normalize_hand",
    "normalize_snapshot",
    "Prediction",
]
