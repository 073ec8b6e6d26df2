"""
Pipeline engine for the color-code tracker.

One iteration: apply queued input, read one frame, run the session's
current mode on it, render, then poll for input. The input poll also paces
the loop; there are no background threads.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

import cv2

from detection.blobs import BlobExtractor
from display.input import InputQueue
from display.overlay import draw_result, mask_view
from matching import ColorCodeMatcher
from models.config import Config
from models.frame import FrameData
from observation import ObservationSource, create_source_from_config
from runtime.context import RuntimeContext
from runtime.session import FrameResult, TrackingSession
from storage.threshold_store import ThresholdStore


@dataclass
class PipelineConfig:
    """
    Configuration for the pipeline engine.
    
    Attributes:
        display: Show the live and mask windows and read keyboard/mouse input.
        show_mask: Show the combined channel mask in a second window.
        poll_ms: waitKey() timeout per frame in milliseconds.
        max_frames: Stop after this many frames (None = until quit or source ends).
        window_name: Title of the live view window.
        mask_window_name: Title of the mask window.
    """
    display: bool = True
    show_mask: bool = True
    poll_ms: int = 1
    max_frames: Optional[int] = None
    window_name: str = "Color Code Tracker"
    mask_window_name: str = "Color Code Tracker - Mask"


@dataclass
class PipelineStats:
    """Runtime statistics for the pipeline."""
    frame_count: int = 0
    marker_count: int = 0
    markers_by_pair: Dict[str, int] = field(default_factory=dict)
    start_time: float = field(default_factory=time.time)
    last_frame_time: float = field(default_factory=time.time)
    fps: float = 0.0
    stop_reason: str = ""


class PipelineEngine:
    """
    Runs a TrackingSession against an ObservationSource.
    
    A source that cannot be opened or fails to deliver a frame ends the run.
    Once the source has opened, however the run ends (quit, source failure,
    Ctrl+C), the source is closed and the session's color ranges are saved.
    A source that never opens leaves the threshold file untouched.
    
    Example:
        source = OpenCVSource(OpenCVSourceConfig(device_id=0))
        engine = PipelineEngine(source, ctx, PipelineConfig(display=True))
        engine.run()
    """

    def __init__(
        self,
        source: ObservationSource,
        ctx: RuntimeContext,
        config: PipelineConfig,
    ):
        self.source = source
        self.ctx = ctx
        self.config = config
        self.stats = PipelineStats()
        self._running = False
        self._opened = False
        self._callbacks: List[Callable[[FrameData, FrameResult], None]] = []

    @property
    def session(self) -> TrackingSession:
        return self.ctx.session

    def add_callback(self, callback: Callable[[FrameData, FrameResult], None]) -> None:
        """
        Add a callback to be called after each frame is processed.
        
        Args:
            callback: Function taking (frame_data, result) as arguments.
        """
        self._callbacks.append(callback)

    def run(self) -> PipelineStats:
        """Run until quit, source failure or max_frames. Returns the final stats."""
        self._running = True
        self.stats = PipelineStats()
        self._opened = False

        try:
            try:
                self.source.open()
            except RuntimeError as e:
                logging.error(f"Video source unavailable: {e}")
                self.stats.stop_reason = "source_unavailable"
                return self.stats
            self._opened = True

            if self.config.display:
                self._setup_windows()
            logging.info(f"Pipeline started: source={self.source.source_id}")

            while self._running:
                self.session.handle_all(self.ctx.inputs.drain())
                if self.session.quit_requested:
                    logging.info("Quit requested by user")
                    self.stats.stop_reason = "quit"
                    break

                frame_data = self.source.read()
                if frame_data is None:
                    logging.error("No frame from source, stopping")
                    self.stats.stop_reason = "source_ended"
                    break

                result = self._process_frame(frame_data)

                for callback in self._callbacks:
                    try:
                        callback(frame_data, result)
                    except Exception as e:
                        logging.warning(f"Callback error: {e}")

                if self.config.display:
                    self._handle_display()

                if self.config.max_frames is not None and self.stats.frame_count >= self.config.max_frames:
                    self.stats.stop_reason = "max_frames"
                    break

        except KeyboardInterrupt:
            logging.info("Pipeline interrupted by user")
            self.stats.stop_reason = "interrupted"
        finally:
            self._cleanup()

        return self.stats

    def stop(self) -> None:
        """Signal the pipeline to stop after the current frame."""
        self._running = False

    def _process_frame(self, frame_data: FrameData) -> FrameResult:
        """Run the session on one frame, render it and update statistics."""
        result = self.session.process_frame(frame_data)

        self.stats.frame_count += 1
        now = time.time()
        elapsed = now - self.stats.last_frame_time
        if elapsed > 0:
            self.stats.fps = 1.0 / elapsed
        self.stats.last_frame_time = now

        for pair in result.markers:
            self.stats.marker_count += 1
            self.stats.markers_by_pair[pair.label] = self.stats.markers_by_pair.get(pair.label, 0) + 1

        annotated = draw_result(frame_data.frame.copy(), result)
        self.ctx.update_frame(annotated, mask_view(result), fps=self.stats.fps)
        return result

    def _setup_windows(self) -> None:
        cv2.namedWindow(self.config.window_name, cv2.WINDOW_AUTOSIZE)
        cv2.setMouseCallback(self.config.window_name, self.ctx.inputs.on_mouse)
        if self.config.show_mask:
            cv2.namedWindow(self.config.mask_window_name, cv2.WINDOW_AUTOSIZE)

    def _handle_display(self) -> None:
        """Show the latest frame and mask, then poll the keyboard."""
        if self.ctx.latest_frame is not None:
            cv2.imshow(self.config.window_name, self.ctx.latest_frame)
        if self.config.show_mask and self.ctx.latest_mask is not None:
            cv2.imshow(self.config.mask_window_name, self.ctx.latest_mask)
        key = cv2.waitKey(self.config.poll_ms)
        if key != -1:
            self.ctx.inputs.on_key(key)

    def _cleanup(self) -> None:
        """Close the source and windows, then persist the color ranges if the source opened."""
        self._running = False

        try:
            self.source.close()
        except Exception as e:
            logging.warning(f"Error closing source: {e}")

        if self.config.display:
            cv2.destroyAllWindows()

        if self._opened:
            self.session.close()
        else:
            logging.warning("Source never opened, channel thresholds left unchanged")

        logging.info(
            f"Pipeline stopped ({self.stats.stop_reason or 'stopped'}): "
            f"frames={self.stats.frame_count}, markers={self.stats.markers_by_pair}"
        )


def create_engine_from_config(
    config: Config,
    source: Optional[ObservationSource] = None,
) -> PipelineEngine:
    """
    Factory function to wire a PipelineEngine from the typed config.
    
    Args:
        config: Application config.
        source: Frame source; built from config.camera when omitted.
    """
    if source is None:
        source = create_source_from_config(config.camera.to_dict(), source_id="main-camera")

    extractor = BlobExtractor(
        min_blob_area=config.detection.min_blob_area,
        erode_kernel=config.detection.erode_kernel,
    )
    matcher = ColorCodeMatcher(dilate_percent=config.detection.dilate_percent)
    store = ThresholdStore(config.calibration.threshold_file, config.calibration.channels)
    session = TrackingSession(
        extractor,
        matcher,
        store,
        n_channels=config.calibration.channels,
        status_interval=config.calibration.status_interval,
    )
    ctx = RuntimeContext(config=config, session=session, inputs=InputQueue())

    pipeline_config = PipelineConfig(
        display=config.display.enabled,
        show_mask=config.display.show_mask,
        poll_ms=config.display.poll_ms,
        max_frames=config.max_frames,
    )
    return PipelineEngine(source, ctx, pipeline_config)
