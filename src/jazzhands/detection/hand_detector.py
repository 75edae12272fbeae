"""
Hand Detection Module - MediaPipe Tasks API
============================================

Wraps the MediaPipe HandLandmarker and converts its results into
immutable HandLandmarks tuples for the rest of the game.
"""

import logging
import threading
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import mediapipe as mp
import numpy as np
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from .landmarks import HandLandmarks, Landmark

logger = logging.getLogger(__name__)

# Model download URL
HAND_LANDMARKER_MODEL_URL = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"
DEFAULT_MODEL_PATH = Path("models") / "hand_landmarker.task"


@dataclass
class HandDetectorConfig:
    """Configuration for hand detector."""
    model_path: str = ""
    max_num_hands: int = 2
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    min_presence_confidence: float = 0.5
    model_complexity: int = 1  # 0 lite, 1 full

    @classmethod
    def from_dict(cls, d: dict) -> "HandDetectorConfig":
        """Create config from dictionary."""
        return cls(
            model_path=d.get("model_path", ""),
            max_num_hands=d.get("max_num_hands", 2),
            min_detection_confidence=d.get("min_detection_confidence", 0.5),
            min_tracking_confidence=d.get("min_tracking_confidence", 0.5),
            min_presence_confidence=d.get("min_presence_confidence", 0.5),
            model_complexity=d.get("model_complexity", 1),
        )


def download_model(url: str, save_path: Path) -> bool:
    """Download the hand landmarker model if not present."""
    if save_path.exists():
        logger.info(f"Model already exists at {save_path}")
        return True

    try:
        save_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Downloading hand landmarker model to {save_path}...")
        urllib.request.urlretrieve(url, save_path)
        logger.info("Model download complete!")
        return True
    except OSError as e:
        logger.error(f"Failed to download model: {e}")
        return False


class HandDetector:
    """
    Hand detection wrapper using MediaPipe Tasks API (HandLandmarker).

    Runs in VIDEO mode, so every call to detect() must carry a
    timestamp greater than the previous one.

    Example:
        >>> detector = HandDetector(HandDetectorConfig())
        >>> detector.start()
        >>> hands = detector.detect(rgb_image, timestamp_ms=33)
        >>> detector.stop()
    """

    def __init__(self, config: Optional[HandDetectorConfig] = None):
        self.config = config or HandDetectorConfig()
        self._landmarker: Optional[vision.HandLandmarker] = None
        self._last_timestamp_ms = -1
        # Serializes inference against close() from another thread
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._landmarker is not None

    def start(self) -> bool:
        """Initialize the hand landmarker."""
        model_path = self.config.model_path or str(DEFAULT_MODEL_PATH)

        if not Path(model_path).exists():
            if not download_model(HAND_LANDMARKER_MODEL_URL, Path(model_path)):
                logger.error("Could not download hand landmarker model")
                return False

        try:
            options = vision.HandLandmarkerOptions(
                base_options=python.BaseOptions(model_asset_path=model_path),
                running_mode=vision.RunningMode.VIDEO,
                num_hands=self.config.max_num_hands,
                min_hand_detection_confidence=self.config.min_detection_confidence,
                min_hand_presence_confidence=self.config.min_presence_confidence,
                min_tracking_confidence=self.config.min_tracking_confidence,
            )
            landmarker = vision.HandLandmarker.create_from_options(options)
        except (RuntimeError, ValueError) as e:
            logger.error(f"Failed to initialize HandLandmarker: {e}")
            return False

        with self._lock:
            self._landmarker = landmarker
            self._last_timestamp_ms = -1
        logger.info(f"HandLandmarker initialized with model: {model_path}")
        if self.config.model_complexity == 0:
            # The task bundle ships a single landmark model
            logger.info("model_complexity=0 requested; using the full landmark model")
        logger.info(f"Max hands: {self.config.max_num_hands}")
        return True

    def stop(self) -> None:
        """Release resources."""
        with self._lock:
            landmarker, self._landmarker = self._landmarker, None
            if landmarker is not None:
                landmarker.close()
                logger.info("HandLandmarker stopped")

    def detect(self, image: np.ndarray, timestamp_ms: int) -> Tuple[HandLandmarks, ...]:
        """
        Detect hands in the given image.

        Args:
            image: RGB image as numpy array (H, W, 3)
            timestamp_ms: Frame timestamp in milliseconds

        Returns:
            One HandLandmarks per detected hand, possibly empty
        """
        height, width = image.shape[:2]
        with self._lock:
            if self._landmarker is None:
                logger.debug("HandLandmarker not running, no detection")
                return ()

            # VIDEO mode rejects non-increasing timestamps
            if timestamp_ms <= self._last_timestamp_ms:
                timestamp_ms = self._last_timestamp_ms + 1
            self._last_timestamp_ms = timestamp_ms

            mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=image)
            result = self._landmarker.detect_for_video(mp_image, timestamp_ms)

        hands = []
        for i, hand_landmarks in enumerate(result.hand_landmarks):
            handedness = "Right"
            confidence = 0.0
            if result.handedness and len(result.handedness) > i:
                handedness = result.handedness[i][0].category_name
                confidence = result.handedness[i][0].score

            hands.append(HandLandmarks(
                landmarks=tuple(Landmark(x=lm.x, y=lm.y, z=lm.z) for lm in hand_landmarks),
                handedness=handedness,
                confidence=confidence,
                image_width=width,
                image_height=height,
            ))

        return tuple(hands)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
