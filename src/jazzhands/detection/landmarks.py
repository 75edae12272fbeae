"""
Hand landmark types shared by the detector, the normalizer and the renderer.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, NamedTuple, Tuple


class LandmarkIndex(IntEnum):
    """Hand landmark indices following MediaPipe convention."""
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


NUM_LANDMARKS = len(LandmarkIndex)

# Connector pairs drawn between landmarks
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),          # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),          # Index
    (5, 9), (9, 10), (10, 11), (11, 12),     # Middle
    (9, 13), (13, 14), (14, 15), (15, 16),   # Ring
    (13, 17), (17, 18), (18, 19), (19, 20),  # Pinky
    (0, 17),                                 # Palm base
]


class Landmark(NamedTuple):
    """A single landmark point with normalized coordinates."""
    x: float  # 0.0 to 1.0, normalized by image width
    y: float  # 0.0 to 1.0, normalized by image height
    z: float  # Depth relative to wrist

    def to_pixel(self, width: int, height: int) -> Tuple[int, int]:
        """Convert normalized coordinates to pixel coordinates."""
        return (int(self.x * width), int(self.y * height))


@dataclass(frozen=True)
class HandLandmarks:
    """One detected hand: its ordered landmarks plus detector metadata."""
    landmarks: Tuple[Landmark, ...]
    handedness: str = "Right"  # "Left" or "Right"
    confidence: float = 0.0
    image_width: int = 640
    image_height: int = 480

    def __len__(self) -> int:
        return len(self.landmarks)

    def __iter__(self):
        return iter(self.landmarks)

    def pixels(self, width: int, height: int) -> List[Tuple[int, int]]:
        """All landmarks as pixel coordinates on a surface of the given size."""
        return [lm.to_pixel(width, height) for lm in self.landmarks]
