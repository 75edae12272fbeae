"""
Tests for Application Configuration
===================================
"""

from pathlib import Path

import pytest

for _module in ("cv2", "mediapipe", "torch", "pygame"):
    pytest.importorskip(_module)

from jazzhands.config import (
    AppConfig,
    LoggingConfig,
    create_app_config,
    load_config,
    validate_config,
)

CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"


class TestLoadConfig:
    """Test suite for load_config."""

    def test_missing_file_returns_empty(self, tmp_path):
        assert load_config(tmp_path / "nope.yaml") == {}

    def test_bundled_config(self):
        config_dict = load_config(CONFIG_PATH)

        assert config_dict["camera"]["width"] == 640
        assert config_dict["mediapipe"]["max_num_hands"] == 2

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError):
            load_config(path)

    def test_validation_warnings(self):
        warnings = validate_config({
            "camera": {"width": "wide"},
            "game": {"round_delay_s": 2},
        })

        assert len(warnings) == 1
        assert "camera.width" in warnings[0]


class TestCreateAppConfig:
    """Test suite for create_app_config."""

    def test_defaults(self):
        config = create_app_config({})

        assert isinstance(config, AppConfig)
        assert config.mediapipe.max_num_hands == 2
        assert config.mediapipe.min_detection_confidence == 0.5
        assert config.mediapipe.min_tracking_confidence == 0.5
        assert config.mediapipe.model_complexity == 1
        assert config.camera.width == 640
        assert config.game.round_delay_s == 1.5
        assert config.logging == LoggingConfig()

    def test_sections(self):
        config = create_app_config({
            "classifier": {"model_path": "m.pth", "top_k": 1},
            "game": {"round_delay_s": 0.5, "gestures_file": "g.yaml"},
            "audio": {"enabled": False},
            "logging": {"level": "DEBUG", "file": "logs/x.log"},
        })

        assert config.classifier.model_path == "m.pth"
        assert config.classifier.top_k == 1
        assert config.game.round_delay_s == 0.5
        assert config.gestures_file == "g.yaml"
        assert not config.audio.enabled
        assert config.logging.level == "DEBUG"
        assert config.logging.file == "logs/x.log"

    def test_bundled_config_round_trip(self):
        config = create_app_config(load_config(CONFIG_PATH))

        assert config.visualization.window_name == "Jazz Hands"
        assert config.gestures_file == "config/gestures.yaml"
