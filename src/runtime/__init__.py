"""
Runtime state for a tracking run.
"""

from .session import FrameResult, Mode, TrackingSession

__all__ = [
    "FrameResult",
    "Mode",
    "TrackingSession",
]
