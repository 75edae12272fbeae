"""
Feature normalization: hand landmarks → flat classifier input.

Feature layout (3 × N dimensions, N landmarks):
    [x0, y0, z0, x1, y1, z1, ...] with every landmark expressed relative
    to the wrist (landmark 0), so the first triple is always zero.
"""

from typing import Optional, Sequence

import numpy as np

from ..detection.landmarks import LandmarkIndex


def normalize_hand(landmarks: Sequence) -> Optional[np.ndarray]:
    """Convert one hand's landmarks into a wrist-relative feature vector.

    Args:
        landmarks: ordered landmarks, each with ``x``, ``y`` and ``z``

    Returns:
        np.ndarray of shape (3 * N,), dtype float32, or None for an
        empty hand
    """
    if len(landmarks) == 0:
        return None

    points = np.array([[lm.x, lm.y, lm.z] for lm in landmarks], dtype=np.float32)
    return (points - points[LandmarkIndex.WRIST]).flatten()


def normalize_snapshot(hands: Sequence) -> Optional[np.ndarray]:
    """Normalize the first hand of a detector snapshot.

    Returns None when the snapshot holds no hands or the first hand
    has no landmarks.
    """
    if not hands:
        return None
    return normalize_hand(hands[0])
