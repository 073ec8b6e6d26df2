"""
Per-frame color-code matching across all channel pairs.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Sequence

from models.geometry import Rect
from models.marker import ALL_PAIRS, ChannelPair, CompositeMarker
from .dilate import DEFAULT_DILATE_PERCENT, dilate_rects
from .pairing import ChannelBlobs, match_pair


class ColorCodeMatcher:
    """
    Turns per-channel blob rectangles into at most one marker per channel pair.

    Example:
        matcher = ColorCodeMatcher(dilate_percent=35)
        blobs = matcher.prepare({0: rects_1, 1: rects_2, 2: rects_3})
        markers = matcher.match(blobs)
    """

    def __init__(self, dilate_percent: int = DEFAULT_DILATE_PERCENT):
        if dilate_percent < 0:
            raise ValueError(f"dilate_percent must be non-negative, got {dilate_percent}")
        self.dilate_percent = dilate_percent

    def prepare(self, rects_by_channel: Mapping[int, Sequence[Rect]]) -> Dict[int, ChannelBlobs]:
        """Dilate each channel's rectangles and attach a fresh usage mask."""
        return {
            channel: ChannelBlobs(
                channel=channel,
                rects=list(rects),
                dilated=dilate_rects(rects, self.dilate_percent),
            )
            for channel, rects in rects_by_channel.items()
        }

    def match(self, blobs: Mapping[int, ChannelBlobs]) -> Dict[ChannelPair, CompositeMarker]:
        """
        Run pair matching for 1-2, 1-3 and 2-3 in that order.

        Usage masks are shared between pairs, so a blob consumed by an earlier
        pair is unavailable to later ones.
        """
        markers: Dict[ChannelPair, CompositeMarker] = {}
        for pair in ALL_PAIRS:
            blobs_a = blobs.get(pair.a)
            blobs_b = blobs.get(pair.b)
            if blobs_a is None or blobs_b is None:
                continue
            found = match_pair(blobs_a.dilated, blobs_b.dilated, blobs_a.usage, blobs_b.usage)
            if found is None:
                continue
            markers[pair] = CompositeMarker(
                pair=pair,
                rect=found.rect,
                index_a=found.index_a,
                index_b=found.index_b,
            )
            logging.debug(f"Color code {pair.label} found at {found.rect.as_xywh()}")
        return markers
