"""
Calibration: turning a dragged screen region into a channel color range.
"""

from .selection import CalibrationSelection
from .sampler import sample_region

__all__ = [
    "CalibrationSelection",
    "sample_region",
]
