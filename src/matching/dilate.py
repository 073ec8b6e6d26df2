"""
Percentage growth of blob rectangles.

Two differently colored patches sitting side by side produce bounding boxes
that touch or nearly touch. Growing each box a little about its own center
makes such neighbours overlap, so the pair matcher can test overlap instead
of measuring gaps.
"""

from __future__ import annotations

from typing import List, Sequence

from models.geometry import Rect

DEFAULT_DILATE_PERCENT = 35


def dilate_rect(rect: Rect, percent: int = DEFAULT_DILATE_PERCENT) -> Rect:
    """
    Grow a rectangle's width and height by `percent`, keeping it centered.

    Args:
        rect: Rectangle to grow.
        percent: Growth in percent of the current size (non-negative).

    Returns:
        New rectangle; the input is not modified.
    """
    dw = rect.width * percent // 100
    dh = rect.height * percent // 100
    return Rect(
        x=rect.x - int(dw / 2),
        y=rect.y - int(dh / 2),
        width=rect.width + dw,
        height=rect.height + dh,
    )


def dilate_rects(rects: Sequence[Rect], percent: int = DEFAULT_DILATE_PERCENT) -> List[Rect]:
    """Dilate every rectangle independently, preserving order."""
    return [dilate_rect(r, percent) for r in rects]
