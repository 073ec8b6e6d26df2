"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class CameraConfig:
    """Video source configuration."""
    device_id: Union[int, str] = 0
    resolution: List[int] = field(default_factory=lambda: [640, 480])
    fps: int = 30
    max_retries: int = 3
    flip_horizontal: bool = False
    flip_vertical: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            device_id=d.get("device_id", 0),
            resolution=d.get("resolution", [640, 480]),
            fps=d.get("fps", 30),
            max_retries=d.get("max_retries", 3),
            flip_horizontal=d.get("flip_horizontal", False),
            flip_vertical=d.get("flip_vertical", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "device_id": self.device_id,
            "resolution": self.resolution,
            "fps": self.fps,
            "max_retries": self.max_retries,
            "flip_horizontal": self.flip_horizontal,
            "flip_vertical": self.flip_vertical,
        }


@dataclass
class DetectionConfig:
    """
    Blob extraction and color-code matching configuration.

    Attributes:
        min_blob_area: Blobs whose bounding box area is not above this are dropped
            (64 suits 640x480; use less for smaller frames).
        dilate_percent: Growth applied to each blob box before pair matching.
        erode_kernel: Side of the square erosion kernel applied to each mask (0 disables).
    """
    min_blob_area: int = 64
    dilate_percent: int = 35
    erode_kernel: int = 3

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectionConfig":
        return cls(
            min_blob_area=d.get("min_blob_area", 64),
            dilate_percent=d.get("dilate_percent", 35),
            erode_kernel=d.get("erode_kernel", 3),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "min_blob_area": self.min_blob_area,
            "dilate_percent": self.dilate_percent,
            "erode_kernel": self.erode_kernel,
        }


@dataclass
class CalibrationConfig:
    """Per-channel threshold persistence."""
    threshold_file: str = "config/color_thresholds.txt"
    channels: int = 3
    status_interval: int = 60

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CalibrationConfig":
        return cls(
            threshold_file=d.get("threshold_file", "config/color_thresholds.txt"),
            channels=d.get("channels", 3),
            status_interval=d.get("status_interval", 60),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "threshold_file": self.threshold_file,
            "channels": self.channels,
            "status_interval": self.status_interval,
        }


@dataclass
class DisplayConfig:
    """On-screen windows and input polling."""
    enabled: bool = True
    show_mask: bool = True
    poll_ms: int = 1

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DisplayConfig":
        return cls(
            enabled=d.get("enabled", True),
            show_mask=d.get("show_mask", True),
            poll_ms=d.get("poll_ms", 1),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "show_mask": self.show_mask,
            "poll_ms": self.poll_ms,
        }


@dataclass
class Config:
    """
    Complete application configuration.
    
    This is a typed representation of the YAML config structure.
    """
    camera: CameraConfig = field(default_factory=CameraConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    max_frames: Optional[int] = None
    log_path: str = "logs/color_code_tracker.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            camera=CameraConfig.from_dict(d.get("camera", {}) or {}),
            detection=DetectionConfig.from_dict(d.get("detection", {}) or {}),
            calibration=CalibrationConfig.from_dict(d.get("calibration", {}) or {}),
            display=DisplayConfig.from_dict(d.get("display", {}) or {}),
            max_frames=d.get("max_frames"),
            log_path=d.get("log_path", "logs/color_code_tracker.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or logging)."""
        d: Dict[str, Any] = {
            "camera": self.camera.to_dict(),
            "detection": self.detection.to_dict(),
            "calibration": self.calibration.to_dict(),
            "display": self.display.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
        if self.max_frames is not None:
            d["max_frames"] = self.max_frames
        return d
