"""
Classifier output types.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Prediction:
    """One ranked classifier output."""
    label: str
    confidence: float

    def matches(self, label: str) -> bool:
        """Case- and whitespace-insensitive label comparison."""
        return normalize_label(self.label) == normalize_label(label)

    def __repr__(self):
        return f"Prediction({self.label!r}, conf={self.confidence:.2f})"


def normalize_label(label: str) -> str:
    return label.strip().casefold()
