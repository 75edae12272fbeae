"""
Presentation loop: camera frames → hand detector → shared snapshot → canvas.

Runs independently of the round loop; the two only share the
HandSnapshot.
"""

import asyncio
import logging

from .snapshot import HandSnapshot

logger = logging.getLogger(__name__)


class PresentationAdapter:
    """
    Feeds every camera frame to the detector and publishes the result.

    Each detector result replaces the snapshot wholesale and triggers a
    full redraw of the landmark canvas.
    """

    def __init__(self, camera, detector, snapshot: HandSnapshot, visualizer):
        self._camera = camera
        self._detector = detector
        self._snapshot = snapshot
        self._visualizer = visualizer
        self._frames = 0

    @property
    def frames_processed(self) -> int:
        return self._frames

    async def run(self) -> None:
        """Process frames until the camera stops."""
        loop = asyncio.get_running_loop()
        logger.info("Presentation loop started")
        async for frame in self._camera.frames():
            hands = await loop.run_in_executor(
                None, self._detector.detect, frame.rgb, frame.timestamp_ms
            )
            self.on_results(hands)
        logger.info("Presentation loop ended after %d frames", self._frames)

    def on_results(self, hands) -> None:
        """Publish one detector result and redraw."""
        self._frames += 1
        self._snapshot.replace(hands)
        self._visualizer.redraw(self._snapshot.latest())
