"""
Tracking session: the calibrate/track state machine driven one frame at a time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional

import numpy as np

from calibration import CalibrationSelection, sample_region
from detection.blobs import BlobExtractor
from matching import ChannelBlobs, ColorCodeMatcher
from models.color import ColorRange
from models.events import (
    DragEnd,
    DragMove,
    DragStart,
    InputEvent,
    Quit,
    SelectChannel,
    ToggleMode,
)
from models.frame import FrameData
from models.marker import NUM_CHANNELS, ChannelPair, CompositeMarker
from storage.threshold_store import ThresholdStore


class Mode(Enum):
    CALIBRATING = "calibrating"
    TRACKING = "tracking"

    @property
    def label(self) -> str:
        return "CAL" if self is Mode.CALIBRATING else "TRACK"


@dataclass
class FrameResult:
    """
    Output of one processed frame.

    Attributes:
        frame_index: Index of the source frame.
        mode: Mode the frame was processed in.
        channel: Active channel at the time.
        blobs: Per-channel blobs (tracking mode only).
        markers: Composite markers keyed by channel pair (tracking mode only).
        masks: Per-channel binary masks (tracking mode only).
        selection: Calibration box bounds (calibration mode only).
        color_range: Range sampled for the active channel (calibration mode only).
    """
    frame_index: int
    mode: Mode
    channel: int
    blobs: Dict[int, ChannelBlobs] = field(default_factory=dict)
    markers: Dict[ChannelPair, CompositeMarker] = field(default_factory=dict)
    masks: Dict[int, np.ndarray] = field(default_factory=dict)
    selection: Optional[tuple] = None
    color_range: Optional[ColorRange] = None


class TrackingSession:
    """
    Holds all mutable tracking state for one run.

    Starts in tracking mode on channel 0 with ranges loaded from the store.
    Input events are applied with handle()/handle_all(); process_frame()
    runs the current mode's pipeline; close() persists the ranges.

    Example:
        session = TrackingSession(BlobExtractor(), ColorCodeMatcher(), ThresholdStore(path))
        session.handle_all(queue.drain())
        result = session.process_frame(frame_data)
        ...
        session.close()
    """

    def __init__(
        self,
        extractor: BlobExtractor,
        matcher: ColorCodeMatcher,
        store: Optional[ThresholdStore] = None,
        n_channels: int = NUM_CHANNELS,
        status_interval: int = 60,
    ):
        self.extractor = extractor
        self.matcher = matcher
        self.store = store
        self.n_channels = n_channels
        self.status_interval = status_interval

        self.mode = Mode.TRACKING
        self.channel = 0
        self.selection = CalibrationSelection()
        self.quit_requested = False
        self.frames_processed = 0
        self._closed = False

        if store is not None:
            self.ranges: List[ColorRange] = list(store.load())
        else:
            self.ranges = [ColorRange.sentinel() for _ in range(n_channels)]

    @property
    def is_calibrating(self) -> bool:
        return self.mode is Mode.CALIBRATING

    def handle(self, event: InputEvent) -> None:
        """Apply one input event to the session state."""
        if isinstance(event, SelectChannel):
            if 0 <= event.channel < self.n_channels:
                self.channel = event.channel
                logging.info(f"Active channel: {self.channel + 1}")
            else:
                logging.debug(f"Ignoring unknown channel {event.channel}")
        elif isinstance(event, ToggleMode):
            self.mode = Mode.TRACKING if self.is_calibrating else Mode.CALIBRATING
            logging.info(f"Mode: {self.mode.value} (channel {self.channel + 1})")
        elif isinstance(event, DragStart):
            if self.is_calibrating:
                self.selection.start(event.x, event.y)
                logging.debug(f"Selection started at ({event.x}, {event.y})")
        elif isinstance(event, DragMove):
            if self.is_calibrating:
                self.selection.extend(event.x, event.y)
        elif isinstance(event, DragEnd):
            if self.is_calibrating:
                self.selection.finish()
        elif isinstance(event, Quit):
            self.quit_requested = True
        else:
            logging.warning(f"Unhandled input event: {event!r}")

    def handle_all(self, events: Iterable[InputEvent]) -> None:
        for event in events:
            self.handle(event)

    def process_frame(self, frame_data: FrameData) -> FrameResult:
        """Run calibration sampling or color-code tracking on one frame."""
        hsv = frame_data.to_hsv()
        self.frames_processed += 1

        if self.is_calibrating:
            result = self._calibrate(hsv, frame_data.frame_index)
        else:
            result = self._track(hsv, frame_data.frame_index)

        if self.status_interval and self.frames_processed % self.status_interval == 0:
            logging.info(
                f"Channel {self.channel + 1} {self.ranges[self.channel]} "
                f"mode={self.mode.value} markers={len(result.markers)}"
            )
        return result

    def _calibrate(self, hsv: np.ndarray, frame_index: int) -> FrameResult:
        color_range = sample_region(hsv, self.selection)
        self.ranges[self.channel] = color_range
        return FrameResult(
            frame_index=frame_index,
            mode=self.mode,
            channel=self.channel,
            selection=self.selection.bounds,
            color_range=color_range,
        )

    def _track(self, hsv: np.ndarray, frame_index: int) -> FrameResult:
        ranges = tuple(self.ranges)
        masks: Dict[int, np.ndarray] = {}
        rects_by_channel = {}
        for channel, color_range in enumerate(ranges):
            masks[channel], rects_by_channel[channel] = self.extractor.extract(hsv, color_range)

        blobs = self.matcher.prepare(rects_by_channel)
        markers = self.matcher.match(blobs)
        return FrameResult(
            frame_index=frame_index,
            mode=self.mode,
            channel=self.channel,
            blobs=blobs,
            markers=markers,
            masks=masks,
        )

    def close(self) -> bool:
        """Persist the current ranges. Safe to call more than once."""
        if self._closed:
            return True
        self._closed = True
        if self.store is None:
            return True
        return self.store.save(self.ranges)
