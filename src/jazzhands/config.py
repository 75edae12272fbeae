"""
Application configuration.

Loads config/config.yaml and builds one typed dataclass per component.
Missing files and sections fall back to the dataclass defaults.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import yaml

from .audio.feedback import AudioConfig
from .capture.camera import CameraConfig
from .detection.hand_detector import HandDetectorConfig
from .game.round_controller import RoundConfig
from .recognition.classifier import GestureClassifierConfig
from .utils.visualization import VisualizerConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config") / "config.yaml"
DEFAULT_GESTURES_PATH = Path("config") / "gestures.yaml"

# Critical fields and their expected types
_CONFIG_SCHEMA = {
    "camera": {
        "device_id": int,
        "width": int,
        "height": int,
        "fps": int,
    },
    "mediapipe": {
        "max_num_hands": int,
        "min_detection_confidence": float,
        "min_tracking_confidence": float,
    },
    "classifier": {
        "model_path": str,
    },
    "game": {
        "round_delay_s": float,
    },
}


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    max_size_mb: int = 10
    backup_count: int = 3

    @classmethod
    def from_dict(cls, config: dict) -> "LoggingConfig":
        """Create config from dictionary."""
        return cls(
            level=config.get("level", "INFO"),
            file=config.get("file"),
            max_size_mb=config.get("max_size_mb", 10),
            backup_count=config.get("backup_count", 3),
        )


@dataclass
class AppConfig:
    """Application configuration container."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: HandDetectorConfig = field(default_factory=HandDetectorConfig)
    classifier: GestureClassifierConfig = field(default_factory=GestureClassifierConfig)
    game: RoundConfig = field(default_factory=RoundConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    visualization: VisualizerConfig = field(default_factory=VisualizerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    gestures_file: str = str(DEFAULT_GESTURES_PATH)


def validate_config(config_dict: dict) -> list:
    """Check critical fields against the schema; returns warning strings."""
    warnings = []
    for section_name, fields in _CONFIG_SCHEMA.items():
        section = config_dict.get(section_name)
        if section is None:
            continue
        if not isinstance(section, dict):
            warnings.append(f"Section '{section_name}' should be a dict, got {type(section).__name__}")
            continue
        for field_name, expected_type in fields.items():
            if field_name not in section:
                continue
            value = section[field_name]
            # Allow int where float is expected
            if expected_type is float and isinstance(value, (int, float)) and not isinstance(value, bool):
                continue
            if not isinstance(value, expected_type):
                warnings.append(
                    f"{section_name}.{field_name}: expected {expected_type.__name__}, "
                    f"got {type(value).__name__} ({value!r})"
                )

    for w in warnings:
        logger.warning("Config validation: %s", w)
    return warnings


def load_config(config_path: Union[str, Path]) -> dict:
    """Load configuration from YAML file; {} when the file is missing."""
    config_path = Path(config_path)
    try:
        with open(config_path, "r") as f:
            config_dict = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file not found: %s, using defaults", config_path)
        return {}

    if not isinstance(config_dict, dict):
        raise ValueError(f"Config root must be a mapping: {config_path}")

    logger.info("Loaded config from %s", config_path)
    validate_config(config_dict)
    return config_dict


def create_app_config(config_dict: dict) -> AppConfig:
    """Create AppConfig from configuration dictionary."""
    return AppConfig(
        camera=CameraConfig.from_dict(config_dict.get("camera", {})),
        mediapipe=HandDetectorConfig.from_dict(config_dict.get("mediapipe", {})),
        classifier=GestureClassifierConfig.from_dict(config_dict.get("classifier", {})),
        game=RoundConfig.from_dict(config_dict.get("game", {})),
        audio=AudioConfig.from_dict(config_dict.get("audio", {})),
        visualization=VisualizerConfig.from_dict(config_dict.get("visualization", {})),
        logging=LoggingConfig.from_dict(config_dict.get("logging", {})),
        gestures_file=config_dict.get("game", {}).get("gestures_file", str(DEFAULT_GESTURES_PATH)),
    )
