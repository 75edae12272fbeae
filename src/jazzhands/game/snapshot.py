"""
Latest-hands snapshot shared between the presentation loop and the
round controller.
"""

from typing import Iterable, Tuple

from ..detection.landmarks import HandLandmarks


class HandSnapshot:
    """Single-writer cell holding the most recent detector result.

    replace() swaps the whole tuple; readers get an immutable tuple that
    later frames cannot change.
    """

    def __init__(self):
        self._hands: Tuple[HandLandmarks, ...] = ()

    def replace(self, hands: Iterable[HandLandmarks]) -> None:
        self._hands = tuple(hands)

    def latest(self) -> Tuple[HandLandmarks, ...]:
        return self._hands

