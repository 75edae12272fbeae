"""
Game session: owns the shared snapshot and the round controller, and
runs the start / stop sequence for the camera, detector, classifier and
audio collaborators.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional

from ..utils.logger import RoundLogger
from .catalog import Gesture, GestureCatalog
from .presentation import PresentationAdapter
from .round_controller import RoundConfig, RoundController, RoundOutcome
from .snapshot import HandSnapshot

logger = logging.getLogger(__name__)


class SessionState(Enum):
    READY = "ready"
    STARTING = "starting"
    RUNNING = "running"
    STOPPED = "stopped"
    FAILED = "failed"


class StartupError(RuntimeError):
    """A collaborator could not be initialized; the session cannot start."""

    def __init__(self, component: str, message: str):
        super().__init__(f"{component}: {message}")
        self.component = component


OUTCOME_TEXT = {
    RoundOutcome.MATCH: "Nice!",
    RoundOutcome.MISMATCH: "Miss",
    RoundOutcome.NO_HAND: "No hand detected",
    RoundOutcome.NO_PREDICTION: "Could not classify",
}


class GameSession:
    """
    One player's game: Start control, Stop control and shared state.

    The start sequence is: load the classifier (awaited), start the
    detector, start the camera, play the begin cue, start the round loop.
    Any startup failure raises StartupError and leaves the session in
    FAILED, where start() is refused.

    Example:
        >>> session = GameSession(catalog, camera, detector, classifier, audio, visualizer)
        >>> await session.start()
        >>> ...
        >>> await session.close()
    """

    def __init__(
        self,
        catalog: GestureCatalog,
        camera,
        detector,
        classifier,
        audio,
        visualizer,
        round_config: Optional[RoundConfig] = None,
        on_gesture: Optional[Callable[[Gesture], None]] = None,
    ):
        self.catalog = catalog
        self.camera = camera
        self.detector = detector
        self.classifier = classifier
        self.audio = audio
        self.visualizer = visualizer
        self._on_gesture = on_gesture

        self.snapshot = HandSnapshot()
        self.round_logger = RoundLogger()
        self.controller = RoundController(
            catalog,
            classifier,
            audio,
            self.snapshot,
            config=round_config,
            on_gesture=self._show_gesture,
            on_outcome=self._record_outcome,
        )
        self.presentation = PresentationAdapter(camera, detector, self.snapshot, visualizer)

        self._state = SessionState.READY
        self._error: Optional[str] = None
        self._presentation_task: Optional[asyncio.Task] = None
        self._stop_requested = False
        self.target: Optional[Gesture] = None
        self.outcome_text = ""

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def can_start(self) -> bool:
        return self._state in (SessionState.READY, SessionState.STOPPED)

    @property
    def status(self) -> str:
        if self._state is SessionState.FAILED:
            return f"Startup failed - {self._error}"
        if self._state is SessionState.RUNNING:
            return f"Round {self.controller.round_number} | x: stop | q: quit"
        if self._state is SessionState.STARTING:
            return "Starting..."
        return "Press START or s | q: quit"

    def _show_gesture(self, gesture: Gesture) -> None:
        self.target = gesture
        if self._on_gesture is not None:
            self._on_gesture(gesture)

    def _record_outcome(self, gesture: Gesture, outcome: RoundOutcome, predictions: List) -> None:
        self.outcome_text = OUTCOME_TEXT.get(outcome, "")
        self.round_logger.log_round(gesture.label, outcome.value, predictions)

    def _check_catalog_coverage(self) -> None:
        """Warn about gestures the classifier can never predict."""
        known = {self.catalog.find(label) for label in self.classifier.labels}
        for gesture in self.catalog:
            if gesture not in known:
                logger.warning("Classifier has no label for gesture %r; it can never match",
                               gesture.label)

    async def start(self) -> None:
        """Run the Start control sequence.

        Raises:
            StartupError: if the classifier, detector or camera fails
        """
        if not self.can_start:
            logger.warning("Start ignored in state %s", self._state.value)
            return

        self._state = SessionState.STARTING
        self._stop_requested = False
        loop = asyncio.get_running_loop()
        try:
            if not self.classifier.is_ready and not await self.classifier.load():
                raise StartupError("classifier", "model could not be loaded")
            self._check_catalog_coverage()

            if not self.audio.is_ready and not self.audio.load(self.catalog):
                logger.warning("Audio unavailable, playing without sound")

            if not self.detector.is_running:
                if not await loop.run_in_executor(None, self.detector.start):
                    raise StartupError("detector", "hand landmarker could not start")

            if not self.camera.is_running:
                if not await loop.run_in_executor(None, self.camera.start):
                    raise StartupError("camera", "camera could not be opened")
        except StartupError as e:
            self._state = SessionState.FAILED
            self._error = str(e)
            logger.error("Startup failed: %s", e)
            raise

        if self._presentation_task is None or self._presentation_task.done():
            self._presentation_task = loop.create_task(self.presentation.run())

        if self._stop_requested:
            logger.info("Stop requested during startup, game not started")
            self._stop_requested = False
            self._state = SessionState.STOPPED
            return

        self.audio.play_begin()
        self.outcome_text = ""
        self.round_logger.log_start()
        self.controller.start()
        self._state = SessionState.RUNNING

    async def stop(self) -> None:
        """Stop the round loop; the camera preview keeps running."""
        if self._state is SessionState.STARTING:
            logger.debug("Stop requested while starting, applied once startup finishes")
            self._stop_requested = True
            return
        if self._state is not SessionState.RUNNING:
            return
        await self.controller.stop()
        self.round_logger.log_stop()
        self.target = None
        self._state = SessionState.STOPPED

    async def close(self) -> None:
        """Stop the game and release every collaborator."""
        await self.stop()
        self.camera.stop()

        task, self._presentation_task = self._presentation_task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        # Waits for an in-flight detect() on the executor
        await asyncio.get_running_loop().run_in_executor(None, self.detector.stop)
        self.audio.close()
