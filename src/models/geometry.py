"""
Integer rectangle model used for blobs and composite markers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle in integer pixel coordinates.

    Attributes:
        x: Left edge (top-left corner) x coordinate.
        y: Top edge (top-left corner) y coordinate.
        width: Width in pixels.
        height: Height in pixels.
    """
    x: int
    y: int
    width: int
    height: int

    @property
    def area(self) -> int:
        if self.width <= 0 or self.height <= 0:
            return 0
        return self.width * self.height

    @property
    def tl(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def br(self) -> Tuple[int, int]:
        return (self.x + self.width, self.y + self.height)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def intersect(self, other: "Rect") -> "Rect":
        """
        Overlapping region of two rectangles.

        Disjoint (or edge-touching) rectangles give an empty Rect with area 0.
        """
        x1 = max(self.x, other.x)
        y1 = max(self.y, other.y)
        x2 = min(self.x + self.width, other.x + other.width)
        y2 = min(self.y + self.height, other.y + other.height)
        if x2 <= x1 or y2 <= y1:
            return Rect(0, 0, 0, 0)
        return Rect(x1, y1, x2 - x1, y2 - y1)

    def union(self, other: "Rect") -> "Rect":
        """Smallest rectangle containing both rectangles."""
        if self.area == 0:
            return other
        if other.area == 0:
            return self
        x1 = min(self.x, other.x)
        y1 = min(self.y, other.y)
        x2 = max(self.x + self.width, other.x + other.width)
        y2 = max(self.y + self.height, other.y + other.height)
        return Rect(x1, y1, x2 - x1, y2 - y1)

    def __and__(self, other: "Rect") -> "Rect":
        return self.intersect(other)

    def __or__(self, other: "Rect") -> "Rect":
        return self.union(other)

    def as_xywh(self) -> Tuple[int, int, int, int]:
        """Return as (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    @classmethod
    def from_xywh(cls, x: int, y: int, w: int, h: int) -> "Rect":
        return cls(x=int(x), y=int(y), width=int(w), height=int(h))
