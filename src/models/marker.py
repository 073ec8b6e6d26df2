"""
Channel pair and composite marker models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .geometry import Rect

NUM_CHANNELS = 3


@dataclass(frozen=True, order=True)
class ChannelPair:
    """Pair of distinct channel indices, stored with a < b."""
    a: int
    b: int

    def __post_init__(self) -> None:
        if self.a >= self.b:
            raise ValueError(f"ChannelPair requires a < b, got ({self.a}, {self.b})")

    @property
    def label(self) -> str:
        """Human-readable 1-based label, e.g. "1-2"."""
        return f"{self.a + 1}-{self.b + 1}"


# Matching order within a frame: 1-2, then 1-3, then 2-3.
ALL_PAIRS: Tuple[ChannelPair, ...] = (
    ChannelPair(0, 1),
    ChannelPair(0, 2),
    ChannelPair(1, 2),
)


@dataclass(frozen=True)
class CompositeMarker:
    """
    A color-code marker: the union of two paired blobs from different channels.

    Attributes:
        pair: Channels the two blobs came from.
        rect: Union of the two dilated blob rectangles.
        index_a: Blob index in the lower channel's blob list.
        index_b: Blob index in the higher channel's blob list.
    """
    pair: ChannelPair
    rect: Rect
    index_a: int
    index_b: int

    @property
    def center(self) -> Tuple[float, float]:
        return self.rect.center
