"""
Presentation layer: input capture and frame annotation.

Nothing here feeds back into tracking except the queued input events.
"""

from .input import InputQueue, channel_for_key, events_for_key
from .overlay import draw_result, mask_view

__all__ = [
    "InputQueue",
    "channel_for_key",
    "events_for_key",
    "draw_result",
    "mask_view",
]
