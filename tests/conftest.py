"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import os
import sys
import time

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models.frame import FrameData  # noqa: E402
from observation.base import ObservationConfig, ObservationSource  # noqa: E402


class MockSource(ObservationSource):
    """In-memory observation source replaying a list of frames."""

    def __init__(self, frames: list = None, config: ObservationConfig = None):
        super().__init__(config or ObservationConfig(source_id="mock"))
        self._frames = frames or []
        self._pos = 0
        self.closed = False

    def open(self) -> None:
        self._is_open = True
        self._pos = 0
        self._frame_index = 0

    def read(self) -> FrameData | None:
        if not self._is_open or self._pos >= len(self._frames):
            return None

        frame = self._frames[self._pos]
        self._pos += 1
        self._frame_index += 1
        return FrameData(
            frame=frame,
            width=frame.shape[1],
            height=frame.shape[0],
            timestamp=time.time(),
            frame_index=self._frame_index,
            source=self.source_id,
        )

    def close(self) -> None:
        self._is_open = False
        self.closed = True


def make_frame(width: int = 200, height: int = 150, color=(0, 0, 0)) -> np.ndarray:
    """Solid BGR frame."""
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[:, :] = color
    return frame


@pytest.fixture
def mock_source_cls():
    return MockSource


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
camera:
  device_id: 0
  resolution: [640, 480]
  fps: 30

detection:
  min_blob_area: 64
  dilate_percent: 35
  erode_kernel: 3

calibration:
  threshold_file: "config/color_thresholds.txt"
  channels: 3

display:
  enabled: true
  poll_ms: 1

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "camera": {
            "device_id": 0,
            "resolution": [640, 480],
            "fps": 30,
        },
        "detection": {
            "min_blob_area": 64,
            "dilate_percent": 35,
            "erode_kernel": 3,
        },
        "calibration": {
            "threshold_file": "config/color_thresholds.txt",
            "channels": 3,
        },
        "display": {
            "enabled": False,
            "poll_ms": 1,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
