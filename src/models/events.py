"""
Input commands delivered to the tracking session.

The presentation layer (key polling, mouse callback) turns raw input into
these objects and queues them; the session drains the queue once per frame.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class SelectChannel:
    """Make `channel` the active calibration channel."""
    channel: int


@dataclass(frozen=True)
class ToggleMode:
    """Switch between tracking and calibration."""


@dataclass(frozen=True)
class DragStart:
    x: int
    y: int


@dataclass(frozen=True)
class DragMove:
    x: int
    y: int


@dataclass(frozen=True)
class DragEnd:
    pass


@dataclass(frozen=True)
class Quit:
    pass


InputEvent = Union[SelectChannel, ToggleMode, DragStart, DragMove, DragEnd, Quit]
