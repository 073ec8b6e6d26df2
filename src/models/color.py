"""
HSV color range model for one tracking channel.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

HSV = Tuple[int, int, int]

# An inverted range (min above max on every axis) that cv2.inRange never matches.
SENTINEL_MIN: HSV = (255, 255, 255)
SENTINEL_MAX: HSV = (0, 0, 0)


@dataclass(frozen=True)
class ColorRange:
    """
    Closed HSV interval per axis, 8-bit bounds.

    Attributes:
        hsv_min: Lower (H, S, V) bound, inclusive.
        hsv_max: Upper (H, S, V) bound, inclusive.
    """
    hsv_min: HSV = SENTINEL_MIN
    hsv_max: HSV = SENTINEL_MAX

    def __post_init__(self) -> None:
        for name in ("hsv_min", "hsv_max"):
            values = getattr(self, name)
            if len(values) != 3:
                raise ValueError(f"{name} must have 3 components, got {values!r}")
            if not all(0 <= int(v) <= 255 for v in values):
                raise ValueError(f"{name} components must be in [0, 255], got {values!r}")
            object.__setattr__(self, name, tuple(int(v) for v in values))

    @classmethod
    def sentinel(cls) -> "ColorRange":
        """Range for a channel that has never been calibrated."""
        return cls(SENTINEL_MIN, SENTINEL_MAX)

    @property
    def matches_nothing(self) -> bool:
        return any(lo > hi for lo, hi in zip(self.hsv_min, self.hsv_max))

    @property
    def lower(self) -> np.ndarray:
        return np.array(self.hsv_min, dtype=np.uint8)

    @property
    def upper(self) -> np.ndarray:
        return np.array(self.hsv_max, dtype=np.uint8)

    def __str__(self) -> str:
        return f"HSVMIN{self.hsv_min} HSVMAX{self.hsv_max}"
