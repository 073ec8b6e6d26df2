"""
Color-code matching: rectangle dilation and blob pairing.

- dilate_rect / dilate_rects: grow blob boxes about their centers
- match_pair: greedy largest-union pairing between two channels
- ColorCodeMatcher: runs the three channel pairs for one frame
"""

from .dilate import DEFAULT_DILATE_PERCENT, dilate_rect, dilate_rects
from .pairing import ChannelBlobs, PairMatch, UsageMask, match_pair
from .color_code import ColorCodeMatcher

__all__ = [
    "DEFAULT_DILATE_PERCENT",
    "dilate_rect",
    "dilate_rects",
    "ChannelBlobs",
    "PairMatch",
    "UsageMask",
    "match_pair",
    "ColorCodeMatcher",
]
