"""
Color-code marker tracker.

Tracks markers made of two adjacent color patches in a live video feed.
Three color channels are calibrated by dragging over each color; any two
channels whose blobs sit side by side form a marker.

Usage:
    python src/main.py --config config/config.yaml

Controls (live window):
    right click   toggle calibration / tracking mode
    left drag     select the color region for the active channel (calibration)
    1, 2, 3       select the active channel
    q, Esc        quit and save channel thresholds
"""

import os
import sys
import argparse
import logging
from typing import Dict, Any, Tuple, Optional

import yaml

from models.config import Config
from ops.logging import setup_logging
from pipeline.engine import create_engine_from_config

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        base_path = os.path.join(os.path.dirname(config_path), "default.yaml")
        base_cfg: Dict[str, Any] = {}
        if os.path.exists(base_path):
            with open(base_path, "r") as f:
                base_cfg = yaml.safe_load(f) or {}

        local_overrides_path = os.path.join(os.path.dirname(config_path), "config.yaml")
        local_cfg: Dict[str, Any] = {}
        if os.path.exists(local_overrides_path):
            with open(local_overrides_path, "r") as f:
                local_cfg = yaml.safe_load(f) or {}

        merged = _deep_merge(base_cfg, local_cfg)

        # Finally apply explicit config_path if it's not the local override file itself
        if os.path.exists(config_path) and os.path.abspath(config_path) != os.path.abspath(local_overrides_path):
            with open(config_path, "r") as f:
                explicit_cfg = yaml.safe_load(f) or {}
            merged = _deep_merge(merged, explicit_cfg)

        return merged
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _is_non_negative_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.
    
    Args:
        config: Configuration dictionary
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['camera', 'detection', 'calibration', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Camera
    camera = config.get('camera') or {}
    if 'device_id' not in camera:
        return False, "Missing camera.device_id"
    device_id = camera['device_id']
    if isinstance(device_id, bool) or not isinstance(device_id, (int, str)):
        return False, "camera.device_id must be an integer (index) or string (file path)"
    if isinstance(device_id, int) and device_id < 0:
        return False, "camera.device_id integer must be non-negative"

    if 'resolution' in camera:
        resolution = camera['resolution']
        if not isinstance(resolution, list) or len(resolution) != 2:
            return False, "camera.resolution must be a list of [width, height]"
        if not all(isinstance(x, int) and x > 0 for x in resolution):
            return False, "camera.resolution values must be positive integers"

    if 'fps' in camera:
        if not isinstance(camera['fps'], int) or camera['fps'] <= 0:
            return False, "camera.fps must be a positive integer"

    # Detection
    detection = config.get('detection') or {}
    for key in ('min_blob_area', 'dilate_percent', 'erode_kernel'):
        if key in detection and not _is_non_negative_int(detection[key]):
            return False, f"detection.{key} must be a non-negative integer"

    # Calibration
    calibration = config.get('calibration') or {}
    if 'threshold_file' in calibration:
        if not isinstance(calibration['threshold_file'], str) or not calibration['threshold_file']:
            return False, "calibration.threshold_file must be a non-empty string"
    if 'channels' in calibration and calibration['channels'] != 3:
        return False, "calibration.channels must be 3"
    if 'status_interval' in calibration and not _is_non_negative_int(calibration['status_interval']):
        return False, "calibration.status_interval must be a non-negative integer"

    # Display
    display = config.get('display') or {}
    if 'poll_ms' in display:
        if not isinstance(display['poll_ms'], int) or display['poll_ms'] <= 0:
            return False, "display.poll_ms must be a positive integer"

    if config.get('max_frames') is not None:
        if not isinstance(config['max_frames'], int) or config['max_frames'] <= 0:
            return False, "max_frames must be a positive integer"

    # Logging
    if config['log_level'] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"

    return True, None


def apply_cli_overrides(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Fold command-line switches into the config dictionary."""
    if args.source is not None:
        source = args.source
        config.setdefault('camera', {})['device_id'] = int(source) if source.isdigit() else source
    if args.headless:
        config.setdefault('display', {})['enabled'] = False
    if args.max_frames is not None:
        config['max_frames'] = args.max_frames
    if args.threshold_file is not None:
        config.setdefault('calibration', {})['threshold_file'] = args.threshold_file
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Color-code marker tracker')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--source', type=str, default=None,
                        help='Camera index or video file (overrides camera.device_id)')
    parser.add_argument('--headless', action='store_true',
                        help='Run without windows or keyboard/mouse input')
    parser.add_argument('--max-frames', type=int, default=None,
                        help='Stop after this many frames')
    parser.add_argument('--threshold-file', type=str, default=None,
                        help='Channel threshold file (overrides calibration.threshold_file)')
    return parser


def main(argv=None) -> int:
    """Main application function."""
    args = build_parser().parse_args(argv)

    config_dict = apply_cli_overrides(load_config(args.config), args)

    is_valid, error_msg = validate_config(config_dict)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        return 1

    config = Config.from_dict(config_dict)
    setup_logging(config.log_path, config.log_level)

    logging.info("Starting color-code tracker")
    if config.display.enabled:
        logging.info(
            "Controls: right click = calibrate/track, drag = select color, "
            "1/2/3 = channel, q/Esc = quit"
        )

    engine = create_engine_from_config(config)
    stats = engine.run()

    logging.info(f"Color-code tracker stopped after {stats.frame_count} frames")
    return 0 if stats.stop_reason != "source_unavailable" else 1


if __name__ == "__main__":
    sys.exit(main())
