"""
The user-dragged calibration box.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass
class CalibrationSelection:
    """
    Screen rectangle dragged over the color to calibrate.

    (x1, y1) is where the drag started and (x2, y2) follows the pointer.
    Dragging up or left leaves x2 < x1 or y2 < y1; such a box is empty.
    """
    x1: int = 0
    y1: int = 0
    x2: int = 1
    y2: int = 1
    dragging: bool = False

    def start(self, x: int, y: int) -> None:
        """Begin a new drag: collapse the box onto the click point."""
        self.x1 = self.x2 = int(x)
        self.y1 = self.y2 = int(y)
        self.dragging = True

    def extend(self, x: int, y: int) -> None:
        """Move the bottom-right corner while a drag is in progress."""
        if not self.dragging:
            return
        self.x2 = int(x)
        self.y2 = int(y)

    def finish(self) -> None:
        self.dragging = False

    @property
    def bounds(self) -> Tuple[int, int, int, int]:
        return (self.x1, self.y1, self.x2, self.y2)

    @property
    def is_empty(self) -> bool:
        return self.x1 >= self.x2 or self.y1 >= self.y2
