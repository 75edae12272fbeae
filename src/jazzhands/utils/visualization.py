"""
Visualization Module
=====================

Landmark canvas and game overlays drawn with OpenCV.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import cv2
import numpy as np

from ..detection.landmarks import HAND_CONNECTIONS, HandLandmarks


@dataclass
class VisualizerConfig:
    """Visualization settings."""
    width: int = 640
    height: int = 480
    show_landmarks: bool = True
    show_connections: bool = True
    window_name: str = "Jazz Hands"

    # Colors (BGR format)
    connection_color: Tuple[int, int, int] = (255, 0, 0)    # Blue
    landmark_color: Tuple[int, int, int] = (0, 255, 0)      # Green
    text_color: Tuple[int, int, int] = (255, 255, 255)      # White
    success_color: Tuple[int, int, int] = (0, 255, 0)       # Green
    warning_color: Tuple[int, int, int] = (0, 0, 255)       # Red
    button_color: Tuple[int, int, int] = (0, 160, 255)      # Orange

    connection_thickness: int = 2
    landmark_radius: int = 4

    # Font settings
    font_scale: float = 0.7
    font_thickness: int = 2

    @classmethod
    def from_dict(cls, config: dict) -> "VisualizerConfig":
        """Create config from dictionary."""
        colors = config.get("colors", {})
        return cls(
            width=config.get("width", 640),
            height=config.get("height", 480),
            show_landmarks=config.get("show_landmarks", True),
            show_connections=config.get("show_connections", True),
            window_name=config.get("window_name", "Jazz Hands"),
            connection_color=tuple(colors.get("connections", [255, 0, 0])),
            landmark_color=tuple(colors.get("landmarks", [0, 255, 0])),
            text_color=tuple(colors.get("text", [255, 255, 255])),
            connection_thickness=config.get("connection_thickness", 2),
            landmark_radius=config.get("landmark_radius", 4),
            font_scale=config.get("font_scale", 0.7),
            font_thickness=config.get("font_thickness", 2),
        )


class Visualizer:
    """
    Draws hands onto a transparent canvas and composes the game screen.

    The canvas has the capture resolution; redraw() clears it before
    drawing, so each detector result fully replaces the previous one.

    Example:
        >>> viz = Visualizer(VisualizerConfig())
        >>> viz.redraw(hands)
        >>> screen = viz.compose(frame.image, target="fist", status="Round 3")
        >>> cv2.imshow(viz.config.window_name, screen)
    """

    def __init__(self, config: Optional[VisualizerConfig] = None):
        self.config = config or VisualizerConfig()
        self._font = cv2.FONT_HERSHEY_SIMPLEX
        self._canvas = np.zeros((self.config.height, self.config.width, 3), dtype=np.uint8)
        self._button_rect: Optional[Tuple[int, int, int, int]] = None

    @property
    def canvas(self) -> np.ndarray:
        return self._canvas

    def clear(self) -> None:
        self._canvas[:] = 0

    def redraw(self, hands: Iterable[HandLandmarks]) -> np.ndarray:
        """Clear the canvas and draw every hand's connectors and landmarks."""
        self.clear()
        for hand in hands:
            self.draw_hand(self._canvas, hand)
        return self._canvas

    def draw_hand(self, image: np.ndarray, hand: HandLandmarks) -> np.ndarray:
        """
        Draw single hand landmarks and connections.

        Args:
            image: BGR image to draw on
            hand: Hand landmarks to draw

        Returns:
            Image with hand drawn
        """
        height, width = image.shape[:2]
        points = hand.pixels(width, height)

        if self.config.show_connections:
            for start_idx, end_idx in HAND_CONNECTIONS:
                if end_idx < len(points):
                    cv2.line(image, points[start_idx], points[end_idx],
                             self.config.connection_color, self.config.connection_thickness)

        if self.config.show_landmarks:
            for point in points:
                cv2.circle(image, point, self.config.landmark_radius,
                           self.config.landmark_color, -1)

        return image

    def compose(
        self,
        background: Optional[np.ndarray],
        target: Optional[str] = None,
        outcome: Optional[str] = None,
        outcome_ok: bool = False,
        status: str = "",
        button_label: Optional[str] = None,
    ) -> np.ndarray:
        """
        Build the frame shown to the player.

        Args:
            background: Camera image, or None before the camera starts
            target: Label of the gesture to perform
            outcome: Text describing the last round
            outcome_ok: Draw the outcome in the success color
            status: Status line at the bottom
            button_label: Draw the start button with this label; None hides it

        Returns:
            New BGR image; the background is not modified
        """
        if background is None:
            screen = np.zeros_like(self._canvas)
        else:
            screen = background.copy()

        # Overlay non-black canvas pixels
        mask = self._canvas.any(axis=2)
        screen[mask] = self._canvas[mask]

        if target:
            self.draw_target(screen, target)
        if outcome:
            color = self.config.success_color if outcome_ok else self.config.warning_color
            cv2.putText(screen, outcome, (20, 80), self._font,
                        self.config.font_scale, color, self.config.font_thickness)
        if status:
            cv2.putText(screen, status, (20, screen.shape[0] - 20), self._font,
                        0.5, self.config.text_color, 1)

        self._button_rect = None
        if button_label:
            self.draw_button(screen, button_label)

        return screen

    def draw_target(self, image: np.ndarray, label: str) -> np.ndarray:
        """Draw the target gesture label, top centre, with a shadow."""
        text = f"Show: {label}"
        font_scale = 1.2
        thickness = 3
        text_size = cv2.getTextSize(text, self._font, font_scale, thickness)[0]
        x = (image.shape[1] - text_size[0]) // 2
        y = 40

        cv2.putText(image, text, (x + 2, y + 2), self._font, font_scale, (0, 0, 0), thickness + 2)
        cv2.putText(image, text, (x, y), self._font, font_scale, self.config.success_color, thickness)
        return image

    def draw_button(self, image: np.ndarray, label: str) -> Tuple[int, int, int, int]:
        """Draw a centred button and remember its rectangle for hit tests."""
        height, width = image.shape[:2]
        text_size = cv2.getTextSize(label, self._font, 1.0, 2)[0]
        w = text_size[0] + 60
        h = text_size[1] + 40
        x = (width - w) // 2
        y = (height - h) // 2

        cv2.rectangle(image, (x, y), (x + w, y + h), self.config.button_color, -1)
        cv2.putText(image, label, (x + 30, y + 20 + text_size[1]), self._font,
                    1.0, self.config.text_color, 2)
        self._button_rect = (x, y, w, h)
        return self._button_rect

    def button_hit(self, px: int, py: int) -> bool:
        """True if (px, py) lies inside the button drawn by the last compose()."""
        if self._button_rect is None:
            return False
        x, y, w, h = self._button_rect
        return x <= px <= x + w and y <= py <= y + h
