"""
Derive a channel's HSV range from a region of the frame.
"""

from __future__ import annotations

from typing import Tuple, Union

import numpy as np

from models.color import ColorRange
from .selection import CalibrationSelection

Region = Union[CalibrationSelection, Tuple[int, int, int, int]]


def sample_region(hsv: np.ndarray, region: Region) -> ColorRange:
    """
    Per-axis min and max of the HSV pixels inside a region.

    Covers x in [x1, x2) and y in [y1, y2), clipped to the frame. A single
    min/max pass with no outlier rejection: drag across a uniformly colored
    patch and the result is that patch's range.

    Args:
        hsv: HSV frame, shape (H, W, 3), uint8.
        region: CalibrationSelection or (x1, y1, x2, y2).

    Returns:
        The observed range, or the sentinel range for an empty region.
    """
    if not isinstance(region, CalibrationSelection):
        region = CalibrationSelection(*region)
    if region.is_empty:
        return ColorRange.sentinel()
    x1, y1, x2, y2 = region.bounds

    height, width = hsv.shape[:2]
    clipped = CalibrationSelection(max(0, x1), max(0, y1), min(width, x2), min(height, y2))
    if clipped.is_empty:
        return ColorRange.sentinel()
    x1, y1, x2, y2 = clipped.bounds

    pixels = hsv[y1:y2, x1:x2].reshape(-1, hsv.shape[2])
    lo = pixels.min(axis=0)
    hi = pixels.max(axis=0)
    return ColorRange(
        hsv_min=(int(lo[0]), int(lo[1]), int(lo[2])),
        hsv_max=(int(hi[0]), int(hi[1]), int(hi[2])),
    )
