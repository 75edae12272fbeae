"""
Gesture catalog: the fixed set of playable target gestures.
"""

import logging
import random
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

import yaml

from ..recognition.types import normalize_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Gesture:
    """A target hand pose with its display glyph and success sound."""
    label: str
    glyph: str
    sound: str

    @classmethod
    def from_dict(cls, d: dict) -> "Gesture":
        """Create gesture from dictionary."""
        return cls(
            label=d["label"],
            glyph=d.get("glyph", ""),
            sound=d["sound"],
        )


DEFAULT_GESTURES = (
    Gesture("openHand", "✋", "sounds/kickdrum.wav"),
    Gesture("fist", "👊", "sounds/bonk.wav"),
    Gesture("thumbsUp", "👍", "sounds/bassNote.wav"),
    Gesture("DevilsHorns", "🤟", "sounds/guitarRiff.wav"),
    Gesture("Peace", "✌️", "sounds/partyTrumpet.wav"),
)


class GestureCatalog:
    """
    Immutable, insertion-ordered list of gestures.

    Example:
        >>> catalog = GestureCatalog.default()
        >>> gesture = catalog.choose()
        >>> print(gesture.label, gesture.glyph)
    """

    def __init__(self, gestures: Iterable[Gesture]):
        gestures = tuple(gestures)
        if not gestures:
            raise ValueError("Gesture catalog must contain at least one gesture")

        seen = set()
        for gesture in gestures:
            key = normalize_label(gesture.label)
            if not key:
                raise ValueError("Gesture label must not be empty")
            if key in seen:
                raise ValueError(f"Duplicate gesture label: {gesture.label!r}")
            seen.add(key)

        self._gestures = gestures

    @classmethod
    def default(cls) -> "GestureCatalog":
        return cls(DEFAULT_GESTURES)

    @classmethod
    def from_dict(cls, d: dict) -> "GestureCatalog":
        """Build from a ``{"gestures": [{label, glyph, sound}, ...]}`` mapping.

        A missing or empty ``gestures`` list falls back to the defaults.
        """
        entries = d.get("gestures") or []
        if not entries:
            return cls.default()
        return cls(Gesture.from_dict(entry) for entry in entries)

    @classmethod
    def from_yaml(cls, path: str) -> "GestureCatalog":
        """Load the catalog from a YAML file, or the defaults if it is missing."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Gestures file not found: %s, using defaults", path)
            return cls.default()

        catalog = cls.from_dict(data)
        logger.info("Loaded %d gestures from %s", len(catalog), path)
        return catalog

    @property
    def gestures(self) -> Tuple[Gesture, ...]:
        return self._gestures

    def __len__(self) -> int:
        return len(self._gestures)

    def __iter__(self) -> Iterator[Gesture]:
        return iter(self._gestures)

    def __getitem__(self, index: int) -> Gesture:
        return self._gestures[index]

    def find(self, label: str) -> Optional[Gesture]:
        """Look up a gesture by label, ignoring case and surrounding spaces."""
        key = normalize_label(label)
        for gesture in self._gestures:
            if normalize_label(gesture.label) == key:
                return gesture
        return None

    def choose(self, rng: Optional[random.Random] = None) -> Gesture:
        """Pick a gesture uniformly at random; repeats are allowed."""
        rng = rng or random
        return rng.choice(self._gestures)
