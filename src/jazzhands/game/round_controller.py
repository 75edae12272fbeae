"""
Round Controller
================

Drives the game loop: pick a target gesture, wait, classify the latest
hand snapshot, play feedback, repeat.

Phase transitions are table-driven:

    IDLE / STOPPED     --START-->                         ARMED
    ARMED              --TIMER-->                         EVALUATING
    EVALUATING         --NO_HAND-->                       NO_HAND_DETECTED
    EVALUATING         --MATCH / MISMATCH / NO_PREDICTION--> SCORED
    NO_HAND_DETECTED   --TIMER-->                         ARMED
    SCORED             --TIMER-->                         ARMED
    any running phase  --STOP-->                          STOPPED
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..recognition.normalizer import normalize_snapshot
from .catalog import Gesture, GestureCatalog
from .snapshot import HandSnapshot

logger = logging.getLogger(__name__)


class RoundPhase(Enum):
    IDLE = "idle"
    ARMED = "armed"
    EVALUATING = "evaluating"
    NO_HAND_DETECTED = "no_hand_detected"
    SCORED = "scored"
    STOPPED = "stopped"


class RoundEvent(Enum):
    START = "start"
    TIMER = "timer"
    NO_HAND = "no_hand"
    MATCH = "match"
    MISMATCH = "mismatch"
    NO_PREDICTION = "no_prediction"
    STOP = "stop"


class RoundOutcome(Enum):
    """How a round ended."""
    MATCH = "match"
    MISMATCH = "mismatch"
    NO_HAND = "no_hand"
    NO_PREDICTION = "no_prediction"
    DISCARDED = "discarded"  # result arrived after stop or a newer round

    @property
    def is_success(self) -> bool:
        return self is RoundOutcome.MATCH


_RUNNING_PHASES = (
    RoundPhase.ARMED,
    RoundPhase.EVALUATING,
    RoundPhase.NO_HAND_DETECTED,
    RoundPhase.SCORED,
)

TRANSITIONS = {
    (RoundPhase.IDLE, RoundEvent.START): RoundPhase.ARMED,
    (RoundPhase.STOPPED, RoundEvent.START): RoundPhase.ARMED,
    (RoundPhase.ARMED, RoundEvent.TIMER): RoundPhase.EVALUATING,
    (RoundPhase.EVALUATING, RoundEvent.NO_HAND): RoundPhase.NO_HAND_DETECTED,
    (RoundPhase.EVALUATING, RoundEvent.MATCH): RoundPhase.SCORED,
    (RoundPhase.EVALUATING, RoundEvent.MISMATCH): RoundPhase.SCORED,
    (RoundPhase.EVALUATING, RoundEvent.NO_PREDICTION): RoundPhase.SCORED,
    (RoundPhase.NO_HAND_DETECTED, RoundEvent.TIMER): RoundPhase.ARMED,
    (RoundPhase.SCORED, RoundEvent.TIMER): RoundPhase.ARMED,
}
TRANSITIONS.update({(phase, RoundEvent.STOP): RoundPhase.STOPPED for phase in _RUNNING_PHASES})

_OUTCOME_EVENTS = {
    RoundOutcome.MATCH: RoundEvent.MATCH,
    RoundOutcome.MISMATCH: RoundEvent.MISMATCH,
    RoundOutcome.NO_HAND: RoundEvent.NO_HAND,
    RoundOutcome.NO_PREDICTION: RoundEvent.NO_PREDICTION,
}


class InvalidTransitionError(RuntimeError):
    """Raised when an event is not allowed in the current phase."""

    def __init__(self, phase: RoundPhase, event: RoundEvent):
        super().__init__(f"Event {event.value!r} not allowed in phase {phase.value!r}")
        self.phase = phase
        self.event = event


@dataclass
class RoundConfig:
    """Round timing configuration."""
    round_delay_s: float = 1.5
    seed: Optional[int] = None

    @classmethod
    def from_dict(cls, config: dict) -> "RoundConfig":
        """Create config from dictionary."""
        return cls(
            round_delay_s=config.get("round_delay_s", 1.5),
            seed=config.get("seed"),
        )


class RoundController:
    """
    Round state machine for the gesture game.

    The controller reads hands only through the shared HandSnapshot and
    plays exactly one cue per evaluated round. Classification runs on
    the snapshot captured when the round is evaluated; a result that
    arrives after stop() or after a newer round began is discarded.

    Example:
        >>> controller = RoundController(catalog, classifier, audio, snapshot)
        >>> controller.start()        # inside a running event loop
        >>> ...
        >>> await controller.stop()
    """

    def __init__(
        self,
        catalog: GestureCatalog,
        classifier,
        audio,
        snapshot: HandSnapshot,
        config: Optional[RoundConfig] = None,
        on_gesture: Optional[Callable[[Gesture], None]] = None,
        on_outcome: Optional[Callable[[Gesture, RoundOutcome, list], None]] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or RoundConfig()
        self._catalog = catalog
        self._classifier = classifier
        self._audio = audio
        self._snapshot = snapshot
        self._on_gesture = on_gesture
        self._on_outcome = on_outcome
        self._rng = rng or random.Random(self.config.seed)

        self._phase = RoundPhase.IDLE
        self._running = False
        self._current: Optional[Gesture] = None
        self._round = 0
        self._last_outcome: Optional[RoundOutcome] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def phase(self) -> RoundPhase:
        return self._phase

    @property
    def running(self) -> bool:
        return self._running

    @property
    def current_gesture(self) -> Optional[Gesture]:
        return self._current

    @property
    def round_number(self) -> int:
        return self._round

    @property
    def last_outcome(self) -> Optional[RoundOutcome]:
        return self._last_outcome

    def _fire(self, event: RoundEvent) -> RoundPhase:
        try:
            next_phase = TRANSITIONS[(self._phase, event)]
        except KeyError:
            raise InvalidTransitionError(self._phase, event) from None
        logger.debug("Round %d: %s --%s--> %s", self._round,
                     self._phase.value, event.value, next_phase.value)
        self._phase = next_phase
        return next_phase

    # ------------------------------------------------------------------
    # Start / stop
    # ------------------------------------------------------------------

    def arm(self) -> Gesture:
        """Enter the first round without launching the timer loop."""
        self._fire(RoundEvent.START)
        self._running = True
        self._last_outcome = None
        return self._begin_round()

    def start(self) -> Gesture:
        """Arm the first round and launch the round loop on the running loop."""
        gesture = self.arm()
        self._task = asyncio.get_running_loop().create_task(self._run())
        return gesture

    async def stop(self) -> None:
        """Stop the game; any in-flight classification is discarded."""
        if self._phase not in _RUNNING_PHASES:
            return

        self._running = False
        self._fire(RoundEvent.STOP)
        self._round += 1  # invalidates the in-flight round

        task, self._task = self._task, None
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception("Round loop had failed before stop")
        logger.info("Game stopped")

    # ------------------------------------------------------------------
    # Round loop
    # ------------------------------------------------------------------

    def _begin_round(self) -> Gesture:
        self._round += 1
        self._current = self._catalog.choose(self._rng)
        logger.info("Round %d: show %s %s", self._round,
                    self._current.glyph, self._current.label)
        if self._on_gesture is not None:
            self._on_gesture(self._current)
        return self._current

    def next_round(self) -> Gesture:
        """Leave a finished round and arm a new random gesture."""
        self._fire(RoundEvent.TIMER)
        return self._begin_round()

    async def _run(self) -> None:
        delay = self.config.round_delay_s
        while self._running:
            await asyncio.sleep(delay)
            if not self._running:
                break
            await self.evaluate()
            if not self._running:
                break
            await asyncio.sleep(delay)
            if not self._running:
                break
            self.next_round()

    async def evaluate(self) -> RoundOutcome:
        """Classify the latest snapshot against the current gesture.

        Plays the success cue on a match and the fail cue otherwise,
        including when no hand is visible or the classifier returns
        nothing.
        """
        self._fire(RoundEvent.TIMER)
        token = self._round
        gesture = self._current

        features = normalize_snapshot(self._snapshot.latest())
        if features is None:
            logger.warning("No hands detected")
            self._audio.play_fail()
            return self._resolve(gesture, RoundOutcome.NO_HAND, [])

        try:
            predictions = await self._classifier.classify(features)
        except Exception:
            logger.exception("Classification failed for round %d", token)
            predictions = []

        if token != self._round or not self._running:
            logger.debug("Discarding late result for round %d", token)
            return RoundOutcome.DISCARDED

        if not predictions:
            logger.warning("No prediction for round %d", token)
            self._audio.play_fail()
            return self._resolve(gesture, RoundOutcome.NO_PREDICTION, [])

        top = predictions[0]
        logger.debug("Predicted: %s, Expected: %s", top.label, gesture.label)
        if top.matches(gesture.label):
            self._audio.play_success(gesture)
            return self._resolve(gesture, RoundOutcome.MATCH, predictions)

        self._audio.play_fail()
        return self._resolve(gesture, RoundOutcome.MISMATCH, predictions)

    def _resolve(self, gesture: Gesture, outcome: RoundOutcome, predictions: list) -> RoundOutcome:
        self._fire(_OUTCOME_EVENTS[outcome])
        self._last_outcome = outcome
        if self._on_outcome is not None:
            self._on_outcome(gesture, outcome, predictions)
        return outcome
