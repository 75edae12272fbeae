"""
Jazz Hands
==========

A webcam gesture game: the game shows a target hand gesture, classifies
the player's pose with a trained network and plays a sound for a match
or a miss.

Modules:
    - capture: Camera frame acquisition
    - detection: MediaPipe hand landmark detection
    - recognition: Feature normalization and neural gesture classification
    - game: Gesture catalog, round controller and session wiring
    - audio: Sound cue playback
    - utils: Logging and visualization
"""

__version__ = "1.0.0"
__author__ = "Jazz Hands Team"
