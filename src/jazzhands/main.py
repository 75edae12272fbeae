"""
Jazz Hands - Main Application
=============================

Entry point for the hand gesture rhythm game.
Builds the session from config and drives the OpenCV window on the
asyncio event loop.
"""

import argparse
import asyncio
import logging
import signal
from dataclasses import replace
from typing import Optional

import cv2

from .audio.feedback import AudioFeedback
from .capture.camera import Camera
from .config import DEFAULT_CONFIG_PATH, AppConfig, create_app_config, load_config
from .detection.hand_detector import HandDetector
from .game.catalog import Gesture, GestureCatalog
from .game.round_controller import RoundOutcome
from .game.session import GameSession, SessionState, StartupError
from .recognition.classifier import GestureClassifier
from .utils.logger import setup_logging
from .utils.visualization import Visualizer

logger = logging.getLogger(__name__)

START_LABEL = "START"
UI_INTERVAL_S = 0.015


def build_session(config: AppConfig, on_gesture=None) -> GameSession:
    """Create every component from config and wire them into a session."""
    catalog = GestureCatalog.from_yaml(config.gestures_file)
    # Landmark canvas matches the capture resolution
    viz_config = replace(config.visualization, width=config.camera.width, height=config.camera.height)
    return GameSession(
        catalog,
        camera=Camera(config.camera),
        detector=HandDetector(config.mediapipe),
        classifier=GestureClassifier(config.classifier),
        audio=AudioFeedback(config.audio),
        visualizer=Visualizer(viz_config),
        round_config=config.game,
        on_gesture=on_gesture,
    )


class JazzHandsApp:
    """
    Window, controls and UI loop for one game session.

    Controls:
    - START button / s: start the game
    - x: stop the game
    - q / ESC / closing the window: quit
    """

    def __init__(self, config: AppConfig):
        self.config = config
        self.window_name = config.visualization.window_name
        self.session = build_session(config, on_gesture=self._set_title)

        self._running = False
        self._start_requested = False
        self._start_task: Optional[asyncio.Task] = None
        self._stop_task: Optional[asyncio.Task] = None

    def _set_title(self, gesture: Gesture) -> None:
        # Hershey fonts cannot draw emoji; the window title can
        cv2.setWindowTitle(self.window_name, f"{self.window_name}  {gesture.glyph}  {gesture.label}")

    def _on_mouse(self, event, x, y, flags, param) -> None:
        if event == cv2.EVENT_LBUTTONDOWN and self.session.visualizer.button_hit(x, y):
            self._start_requested = True

    def _signal_handler(self, signum, frame) -> None:
        logger.info(f"Received signal {signum}, shutting down...")
        self._running = False

    def request_start(self) -> None:
        """Start control; ignored while starting or after a fatal startup error."""
        if not self.session.can_start:
            return
        if self._start_task is not None and not self._start_task.done():
            return
        self._start_task = asyncio.get_running_loop().create_task(self._start_game())

    def request_stop(self) -> None:
        """Stop control."""
        if self._stop_task is not None and not self._stop_task.done():
            return
        self._stop_task = asyncio.get_running_loop().create_task(self.session.stop())

    async def _start_game(self) -> None:
        try:
            await self.session.start()
        except StartupError:
            # Already logged; the status line shows the failure
            pass

    async def run(self) -> None:
        """Run the UI loop until the player quits."""
        cv2.namedWindow(self.window_name, cv2.WINDOW_AUTOSIZE)
        cv2.setMouseCallback(self.window_name, self._on_mouse)

        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

        self._running = True
        try:
            while self._running:
                self._render()
                self._handle_key(cv2.waitKey(1) & 0xFF)

                if self._start_requested:
                    self._start_requested = False
                    self.request_start()

                if cv2.getWindowProperty(self.window_name, cv2.WND_PROP_VISIBLE) < 1:
                    self._running = False

                await asyncio.sleep(UI_INTERVAL_S)
        finally:
            if self._stop_task is not None:
                await self._stop_task
            await self.session.close()
            cv2.destroyAllWindows()
            self._print_final_report()

    def _render(self) -> None:
        session = self.session
        frame = session.camera.latest_frame
        last = session.controller.last_outcome
        running = session.state is SessionState.RUNNING

        screen = session.visualizer.compose(
            frame.image if frame is not None else None,
            target=session.target.label if running and session.target else None,
            outcome=session.outcome_text if running else None,
            outcome_ok=last is RoundOutcome.MATCH,
            status=session.status,
            button_label=START_LABEL if session.can_start else None,
        )
        cv2.imshow(self.window_name, screen)

    def _handle_key(self, key: int) -> None:
        if key == ord("q") or key == 27:
            self._running = False
        elif key == ord("s"):
            self.request_start()
        elif key == ord("x"):
            self.request_stop()

    def _print_final_report(self) -> None:
        tally = self.session.round_logger.tally
        if not tally:
            return
        print("\n" + "=" * 40)
        print("FINAL SCORE")
        print("=" * 40)
        for outcome, count in sorted(tally.items()):
            print(f"  {outcome:<15} {count}")
        print("=" * 40)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Jazz Hands - hand gesture rhythm game",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Keyboard Controls:
  s         - Start the game (same as the START button)
  x         - Stop the game
  q/ESC     - Quit

Examples:
  jazzhands
  jazzhands --config custom_config.yaml --debug
        """
    )

    parser.add_argument(
        "--config", "-c",
        default=str(DEFAULT_CONFIG_PATH),
        help="Path to configuration file"
    )

    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args()

    config_dict = load_config(args.config)
    app_config = create_app_config(config_dict)

    log_cfg = app_config.logging
    setup_logging(
        level="DEBUG" if args.debug else log_cfg.level,
        log_file=log_cfg.file,
        max_size_mb=log_cfg.max_size_mb,
        backup_count=log_cfg.backup_count,
    )

    print("""
+-------------------------------------------+
|               JAZZ HANDS                  |
|     show the gesture, hear the band       |
+-------------------------------------------+
    """)

    app = JazzHandsApp(app_config)
    asyncio.run(app.run())


if __name__ == "__main__":
    main()
