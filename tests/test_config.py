"""
Smoke tests for configuration loading, validation and CLI overrides.
"""

import pytest

from main import apply_cli_overrides, build_parser, load_config, main, validate_config


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_valid_config_passes(self, valid_config):
        """A complete valid config passes validation."""
        is_valid, error = validate_config(valid_config)

        assert is_valid is True
        assert error is None

    @pytest.mark.parametrize("section", ["camera", "detection", "calibration", "log_path", "log_level"])
    def test_missing_required_section(self, valid_config, section):
        """Each required section is reported by name."""
        del valid_config[section]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert section in error

    def test_display_section_is_optional(self, valid_config):
        del valid_config["display"]
        assert validate_config(valid_config) == (True, None)

    def test_missing_device_id(self, valid_config):
        del valid_config["camera"]["device_id"]

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "device_id" in error

    @pytest.mark.parametrize("device_id", [[1, 2], -1, True, 1.5])
    def test_invalid_device_id(self, valid_config, device_id):
        """device_id must be a non-negative index or a path string."""
        valid_config["camera"]["device_id"] = device_id

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "device_id" in error

    def test_file_path_device_id(self, valid_config):
        valid_config["camera"]["device_id"] = "videos/markers.mp4"
        assert validate_config(valid_config)[0] is True

    @pytest.mark.parametrize("resolution", [[640], [640, 0], "640x480", [640.0, 480]])
    def test_invalid_resolution(self, valid_config, resolution):
        valid_config["camera"]["resolution"] = resolution

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "resolution" in error

    def test_invalid_fps(self, valid_config):
        valid_config["camera"]["fps"] = 0
        assert validate_config(valid_config)[0] is False

    @pytest.mark.parametrize("key", ["min_blob_area", "dilate_percent", "erode_kernel"])
    def test_negative_detection_values(self, valid_config, key):
        valid_config["detection"][key] = -1

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert key in error

    def test_zero_dilation_allowed(self, valid_config):
        valid_config["detection"]["dilate_percent"] = 0
        assert validate_config(valid_config)[0] is True

    def test_channels_must_be_three(self, valid_config):
        valid_config["calibration"]["channels"] = 4

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "channels" in error

    def test_empty_threshold_file(self, valid_config):
        valid_config["calibration"]["threshold_file"] = ""
        assert validate_config(valid_config)[0] is False

    def test_invalid_poll_ms(self, valid_config):
        valid_config["display"]["poll_ms"] = 0
        assert validate_config(valid_config)[0] is False

    def test_invalid_max_frames(self, valid_config):
        valid_config["max_frames"] = -5
        assert validate_config(valid_config)[0] is False

    def test_invalid_log_level(self, valid_config):
        """Unknown log level fails."""
        valid_config["log_level"] = "VERBOSE"

        is_valid, error = validate_config(valid_config)

        assert is_valid is False
        assert "log_level" in error


class TestLoadConfig:
    """Tests for layered config loading."""

    def test_loads_default_only(self, temp_config_dir):
        """Without config.yaml the defaults are returned as-is."""
        config = load_config(str(temp_config_dir / "config.yaml"))

        assert config["camera"]["device_id"] == 0
        assert config["detection"]["dilate_percent"] == 35

    def test_local_overrides_merge(self, temp_config_dir):
        """config.yaml overrides individual keys without dropping siblings."""
        (temp_config_dir / "config.yaml").write_text("detection:\n  dilate_percent: 50\n")

        config = load_config(str(temp_config_dir / "config.yaml"))

        assert config["detection"]["dilate_percent"] == 50
        assert config["detection"]["min_blob_area"] == 64

    def test_explicit_config_applied_last(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("log_level: WARNING\n")
        explicit = temp_config_dir / "bench.yaml"
        explicit.write_text("log_level: DEBUG\ncamera:\n  device_id: clip.mp4\n")

        config = load_config(str(explicit))

        assert config["log_level"] == "DEBUG"
        assert config["camera"]["device_id"] == "clip.mp4"
        assert config["camera"]["fps"] == 30

    def test_invalid_yaml_exits(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("camera: [unclosed\n")

        with pytest.raises(SystemExit):
            load_config(str(temp_config_dir / "config.yaml"))


class TestCliOverrides:
    def test_defaults_leave_config_alone(self, valid_config):
        args = build_parser().parse_args([])
        assert apply_cli_overrides(dict(valid_config), args) == valid_config

    def test_numeric_source_is_device_index(self, valid_config):
        args = build_parser().parse_args(["--source", "2"])
        assert apply_cli_overrides(valid_config, args)["camera"]["device_id"] == 2

    def test_path_source(self, valid_config):
        args = build_parser().parse_args(["--source", "clip.mp4"])
        assert apply_cli_overrides(valid_config, args)["camera"]["device_id"] == "clip.mp4"

    def test_headless_max_frames_and_threshold_file(self, valid_config):
        valid_config["display"]["enabled"] = True
        args = build_parser().parse_args(
            ["--headless", "--max-frames", "10", "--threshold-file", "t.txt"]
        )

        config = apply_cli_overrides(valid_config, args)

        assert config["display"]["enabled"] is False
        assert config["max_frames"] == 10
        assert config["calibration"]["threshold_file"] == "t.txt"


class TestMain:
    def test_invalid_config_returns_error(self, temp_config_dir):
        (temp_config_dir / "config.yaml").write_text("log_level: LOUD\n")
        assert main(["--config", str(temp_config_dir / "config.yaml")]) == 1

    def test_unavailable_source_returns_error(self, temp_config_dir, tmp_path):
        (temp_config_dir / "config.yaml").write_text(
            "camera:\n  max_retries: 1\n"
            f"log_path: {tmp_path / 'logs' / 'run.log'}\n"
        )
        threshold_file = tmp_path / "thresholds.txt"

        code = main([
            "--config", str(temp_config_dir / "config.yaml"),
            "--source", str(tmp_path / "missing.mp4"),
            "--headless",
            "--threshold-file", str(threshold_file),
        ])

        assert code == 1
        assert not threshold_file.exists()
