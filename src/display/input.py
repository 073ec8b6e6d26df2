"""
Keyboard and mouse input translated into session events.

cv2 delivers mouse events through a callback and key presses through
waitKey(). Both are turned into event objects and queued here; the engine
drains the queue once per frame so all state changes happen on the
frame-processing thread at a fixed point.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable, List, Optional

import cv2

from models.events import (
    DragEnd,
    DragMove,
    DragStart,
    InputEvent,
    Quit,
    SelectChannel,
    ToggleMode,
)

KEY_ESC = 27
DEFAULT_QUIT_KEYS = (KEY_ESC, ord("q"))

_CHANNEL_KEYS = {ord("1"): 0, ord("2"): 1, ord("3"): 2}


def channel_for_key(key: int) -> Optional[int]:
    """Map number keys 1, 2, 3 to channel index 0, 1, 2; anything else to None."""
    return _CHANNEL_KEYS.get(key)


def events_for_key(key: int, quit_keys: Iterable[int] = DEFAULT_QUIT_KEYS) -> List[InputEvent]:
    """
    Events produced by one waitKey() result.

    Args:
        key: Key code already masked with 0xFF (255 means no key).
        quit_keys: Key codes that end the session.
    """
    if key in quit_keys:
        return [Quit()]
    channel = channel_for_key(key)
    if channel is not None:
        return [SelectChannel(channel)]
    return []


class InputQueue:
    """FIFO of input events shared between the display callbacks and the engine."""

    def __init__(self, quit_keys: Iterable[int] = DEFAULT_QUIT_KEYS):
        self._events: Deque[InputEvent] = deque()
        self._quit_keys = tuple(quit_keys)
        self._left_down = False

    def __len__(self) -> int:
        return len(self._events)

    def push(self, event: InputEvent) -> None:
        self._events.append(event)

    def drain(self) -> List[InputEvent]:
        """Remove and return all queued events in arrival order."""
        events = list(self._events)
        self._events.clear()
        return events

    def on_key(self, key: int) -> None:
        for event in events_for_key(key & 0xFF, self._quit_keys):
            self.push(event)

    def on_mouse(self, event: int, x: int, y: int, flags: int, param=None) -> None:
        """cv2.setMouseCallback handler: left drag selects, right click toggles mode."""
        if event == cv2.EVENT_LBUTTONDOWN:
            self._left_down = True
            self.push(DragStart(x, y))
        elif event == cv2.EVENT_MOUSEMOVE:
            if self._left_down:
                self.push(DragMove(x, y))
        elif event == cv2.EVENT_LBUTTONUP:
            self._left_down = False
            self.push(DragEnd())
        elif event == cv2.EVENT_RBUTTONUP:
            self.push(ToggleMode())
