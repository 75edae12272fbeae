"""
Camera Capture Module
=====================

OpenCV camera capture. Frames are read in the default executor and
delivered to the event loop through the frames() async iterator.
"""

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Tuple

import cv2
import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    device_id: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30
    buffer_size: int = 1  # Minimal buffering for low latency
    flip_horizontal: bool = True
    warmup_frames: int = 5

    @classmethod
    def from_dict(cls, config: dict) -> "CameraConfig":
        """Create config from dictionary (YAML parsed)."""
        return cls(
            device_id=config.get("device_id", 0),
            width=config.get("width", 640),
            height=config.get("height", 480),
            fps=config.get("fps", 30),
            buffer_size=config.get("buffer_size", 1),
            flip_horizontal=config.get("flip_horizontal", True),
            warmup_frames=config.get("warmup_frames", 5),
        )


@dataclass
class Frame:
    """Container for captured frame with metadata."""
    image: np.ndarray
    timestamp: float
    frame_number: int

    @property
    def rgb(self) -> np.ndarray:
        """Convert BGR to RGB."""
        return cv2.cvtColor(self.image, cv2.COLOR_BGR2RGB)

    @property
    def timestamp_ms(self) -> int:
        return int(self.timestamp * 1000)


class Camera:
    """
    Camera capture at a target resolution.

    Example:
        >>> camera = Camera(CameraConfig())
        >>> camera.start()
        >>> async for frame in camera.frames():
        ...     process(frame.image)
        >>> camera.stop()
    """

    def __init__(self, config: Optional[CameraConfig] = None):
        self.config = config or CameraConfig()
        self._cap: Optional[cv2.VideoCapture] = None
        self._frame_number = 0
        self._running = False
        self._latest_frame: Optional[Frame] = None
        # Guards the capture handle against release during an executor read
        self._lock = threading.Lock()

    def start(self) -> bool:
        """
        Start camera capture.

        Returns:
            True if camera started successfully
        """
        logger.info("Starting camera (device={}, {}x{}@{}fps)".format(
            self.config.device_id, self.config.width, self.config.height, self.config.fps))

        self._cap = cv2.VideoCapture(self.config.device_id)
        if not self._cap.isOpened():
            logger.error("Failed to open camera device {}".format(self.config.device_id))
            self._cap = None
            return False

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.height)
        self._cap.set(cv2.CAP_PROP_FPS, self.config.fps)
        self._cap.set(cv2.CAP_PROP_BUFFERSIZE, self.config.buffer_size)

        actual_width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        actual_height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        logger.info("Camera initialized: {}x{}".format(actual_width, actual_height))

        if self.config.warmup_frames > 0:
            logger.info("Warming up camera ({} frames)...".format(self.config.warmup_frames))
            for _ in range(self.config.warmup_frames):
                self._cap.read()

        self._running = True
        self._frame_number = 0
        return True

    def stop(self) -> None:
        """Stop camera capture and release resources."""
        self._running = False

        with self._lock:
            if self._cap:
                self._cap.release()
                self._cap = None
                logger.info("Camera stopped")

        self._latest_frame = None

    def read(self) -> Optional[Frame]:
        """Capture a single frame, or None if capture failed."""
        with self._lock:
            if not self._running or not self._cap:
                return None
            ret, image = self._cap.read()

        if not ret or image is None:
            logger.warning("Failed to capture frame")
            return None

        # Mirror so the player sees their hand move naturally
        if self.config.flip_horizontal:
            image = cv2.flip(image, 1)

        # Match the rendering surface when the device ignores the requested size
        if image.shape[1] != self.config.width or image.shape[0] != self.config.height:
            image = cv2.resize(image, (self.config.width, self.config.height))

        self._frame_number += 1

        frame = Frame(
            image=image,
            timestamp=time.time(),
            frame_number=self._frame_number,
        )
        self._latest_frame = frame
        return frame

    async def frames(self) -> AsyncIterator[Frame]:
        """Yield frames until the camera is stopped."""
        loop = asyncio.get_running_loop()
        while self._running:
            frame = await loop.run_in_executor(None, self.read)
            if frame is None:
                # Back off after a failed read
                await asyncio.sleep(0.01)
                continue
            yield frame

    @property
    def latest_frame(self) -> Optional[Frame]:
        return self._latest_frame

    @property
    def is_running(self) -> bool:
        """Check if camera is currently running."""
        return self._running

    @property
    def resolution(self) -> Tuple[int, int]:
        """Get current camera resolution."""
        return (self.config.width, self.config.height)

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.stop()
        return False
