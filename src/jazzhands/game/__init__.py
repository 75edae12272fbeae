"""Gesture catalog, shared snapshot and round controller."""
from .catalog import Gesture, GestureCatalog
from .round_controller import RoundConfig, RoundController, RoundOutcome, RoundPhase
from .snapshot import HandSnapshot

__all__ = [
    "Gesture",
    "GestureCatalog",
    "RoundConfig",
    "RoundController",
    "RoundOutcome",
    "RoundPhase",
    "HandSnapshot",
]
