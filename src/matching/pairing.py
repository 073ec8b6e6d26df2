"""
Pairing of blobs from two color channels into one color-code marker.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

from models.geometry import Rect


class UsageMask:
    """
    Indices of blobs in one channel already consumed by a marker this frame.

    One mask exists per channel per frame and is shared by every pairing that
    involves that channel, so a blob can belong to at most one marker.
    """

    def __init__(self) -> None:
        self._used: Set[int] = set()

    def __contains__(self, index: int) -> bool:
        return index in self._used

    def __len__(self) -> int:
        return len(self._used)

    def mark(self, index: int) -> None:
        self._used.add(index)


@dataclass
class ChannelBlobs:
    """
    Blobs found for one channel in the current frame.

    Attributes:
        channel: Channel index.
        rects: Raw bounding rectangles from the mask.
        dilated: The same rectangles after dilation, index-aligned with `rects`.
        usage: Consumption state of each blob for this frame.
    """
    channel: int
    rects: List[Rect] = field(default_factory=list)
    dilated: List[Rect] = field(default_factory=list)
    usage: UsageMask = field(default_factory=UsageMask)

    def __post_init__(self) -> None:
        if len(self.rects) != len(self.dilated):
            raise ValueError("rects and dilated must be the same length")

    def __len__(self) -> int:
        return len(self.rects)


@dataclass(frozen=True)
class PairMatch:
    """Winning pair: union rectangle and the blob index in each channel."""
    rect: Rect
    index_a: int
    index_b: int


def match_pair(
    rects_a: Sequence[Rect],
    rects_b: Sequence[Rect],
    used_a: UsageMask,
    used_b: UsageMask,
) -> Optional[PairMatch]:
    """
    Select the overlapping blob pair with the largest union.

    Every unused blob in A is tested against every unused blob in B. Pairs
    whose rectangles overlap with positive area are candidates, scored by
    the area of their union. The first candidate with the strictly largest
    score wins (A index major, B index minor). Both winners are marked used.

    Rectangles are expected to be dilated already.

    Returns:
        The winning PairMatch, or None if no unused pair overlaps. Usage
        masks are left untouched when nothing is found.
    """
    best: Optional[PairMatch] = None
    best_area = 0

    for i, rect_a in enumerate(rects_a):
        if i in used_a:
            continue
        for j, rect_b in enumerate(rects_b):
            if j in used_b:
                continue
            if (rect_a & rect_b).area <= 0:
                continue
            candidate = rect_a | rect_b
            if candidate.area > best_area:
                best = PairMatch(rect=candidate, index_a=i, index_b=j)
                best_area = candidate.area

    if best is None:
        return None

    used_a.mark(best.index_a)
    used_b.mark(best.index_b)
    return best
