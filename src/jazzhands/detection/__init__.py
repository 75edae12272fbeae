"""Hand detection module using MediaPipe."""
from .landmarks import HandLandmarks, Landmark, LandmarkIndex

__all__ = ["HandLandmarks", "Landmark", "LandmarkIndex"]
