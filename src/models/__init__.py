"""
Typed models for the color-code tracker.

Geometry, color ranges and markers are immutable values; FrameData and the
config dataclasses carry the adapters to and from plain dicts and arrays.
"""

from .frame import FrameData
from .geometry import Rect
from .color import ColorRange
from .marker import ALL_PAIRS, NUM_CHANNELS, ChannelPair, CompositeMarker
from .events import (
    DragEnd,
    DragMove,
    DragStart,
    InputEvent,
    Quit,
    SelectChannel,
    ToggleMode,
)
from .config import (
    Config,
    CameraConfig,
    DetectionConfig,
    CalibrationConfig,
    DisplayConfig,
)

__all__ = [
    # Frame
    "FrameData",
    # Geometry
    "Rect",
    # Color
    "ColorRange",
    # Markers
    "ALL_PAIRS",
    "NUM_CHANNELS",
    "ChannelPair",
    "CompositeMarker",
    # Input events
    "InputEvent",
    "SelectChannel",
    "ToggleMode",
    "DragStart",
    "DragMove",
    "DragEnd",
    "Quit",
    # Config
    "Config",
    "CameraConfig",
    "DetectionConfig",
    "CalibrationConfig",
    "DisplayConfig",
]
