"""
Tests for the pipeline engine run loop.
"""

import numpy as np
import pytest

from conftest import MockSource, make_frame
from detection.blobs import BlobExtractor
from matching import ColorCodeMatcher
from models.color import ColorRange
from models.config import Config
from models.events import DragMove, DragStart, Quit, SelectChannel, ToggleMode
from observation.base import ObservationConfig
from pipeline.engine import PipelineConfig, PipelineEngine, create_engine_from_config
from runtime.context import RuntimeContext
from runtime.session import Mode, TrackingSession
from storage.threshold_store import ThresholdStore, load_thresholds


class FailingSource(MockSource):
    def open(self) -> None:
        raise RuntimeError("device not found")


def _two_patch_frame() -> np.ndarray:
    frame = make_frame(200, 200)
    frame[50:80, 40:70] = (0, 0, 255)
    frame[50:80, 72:102] = (255, 0, 0)
    return frame


def _engine(source, tmp_path, max_frames=None):
    store = ThresholdStore(str(tmp_path / "thresholds.txt"))
    session = TrackingSession(BlobExtractor(erode_kernel=0), ColorCodeMatcher(), store)
    ctx = RuntimeContext(config=Config(), session=session)
    return PipelineEngine(source, ctx, PipelineConfig(display=False, max_frames=max_frames))


class TestPipelineEngine:
    def test_runs_until_source_ends(self, tmp_path):
        source = MockSource([make_frame() for _ in range(5)])
        engine = _engine(source, tmp_path)

        stats = engine.run()

        assert stats.frame_count == 5
        assert stats.stop_reason == "source_ended"
        assert source.closed

    def test_max_frames(self, tmp_path):
        engine = _engine(MockSource([make_frame() for _ in range(10)]), tmp_path, max_frames=3)

        stats = engine.run()

        assert stats.frame_count == 3
        assert stats.stop_reason == "max_frames"

    def test_quit_before_first_frame(self, tmp_path):
        source = MockSource([make_frame() for _ in range(5)])
        engine = _engine(source, tmp_path)
        engine.ctx.inputs.push(Quit())

        stats = engine.run()

        assert stats.frame_count == 0
        assert stats.stop_reason == "quit"
        assert source.closed

    def test_quit_from_callback(self, tmp_path):
        engine = _engine(MockSource([make_frame() for _ in range(10)]), tmp_path)

        def quit_after_two(frame_data, result):
            if frame_data.frame_index == 2:
                engine.ctx.inputs.push(Quit())

        engine.add_callback(quit_after_two)
        stats = engine.run()

        assert stats.frame_count == 2
        assert stats.stop_reason == "quit"

    def test_source_unavailable_does_not_save(self, tmp_path):
        source = FailingSource([make_frame()])
        engine = _engine(source, tmp_path)

        stats = engine.run()

        assert stats.stop_reason == "source_unavailable"
        assert stats.frame_count == 0
        assert source.closed
        assert not (tmp_path / "thresholds.txt").exists()

    def test_source_unavailable_keeps_existing_file(self, tmp_path):
        path = tmp_path / "thresholds.txt"
        original = (
            "channel 0, HSVMIN{0,120,80}, HSVMAX{10,255,255}\n"
            "channel 1, HSVMIN{100,150,50}, HSVMAX{130,255,255}\n"
        )
        path.write_text(original)
        engine = _engine(FailingSource([make_frame()]), tmp_path)
        assert all(r.matches_nothing for r in engine.session.ranges)

        engine.run()

        assert path.read_text() == original

    def test_ranges_saved_on_exit(self, tmp_path):
        engine = _engine(MockSource([make_frame()]), tmp_path)
        engine.session.ranges[1] = ColorRange((1, 2, 3), (4, 5, 6))

        engine.run()

        saved = load_thresholds(str(tmp_path / "thresholds.txt"))
        assert saved[1] == ColorRange((1, 2, 3), (4, 5, 6))
        assert saved[0].matches_nothing

    def test_callback_errors_do_not_stop_run(self, tmp_path):
        engine = _engine(MockSource([make_frame() for _ in range(3)]), tmp_path)
        calls = []

        def bad_callback(frame_data, result):
            calls.append(frame_data.frame_index)
            raise ValueError("boom")

        engine.add_callback(bad_callback)
        stats = engine.run()

        assert calls == [1, 2, 3]
        assert stats.frame_count == 3

    def test_calibrate_then_track(self, tmp_path):
        red = make_frame(200, 200, color=(0, 0, 255))
        blue = make_frame(200, 200, color=(255, 0, 0))
        frames = [red, blue, _two_patch_frame()]
        engine = _engine(MockSource(frames), tmp_path)
        results = []

        def script(frame_data, result):
            results.append(result)
            if frame_data.frame_index == 1:
                engine.ctx.inputs.push(SelectChannel(1))
            elif frame_data.frame_index == 2:
                engine.ctx.inputs.push(ToggleMode())

        engine.add_callback(script)
        for event in (ToggleMode(), DragStart(10, 10), DragMove(20, 20)):
            engine.ctx.inputs.push(event)

        stats = engine.run()

        assert [r.mode for r in results] == [Mode.CALIBRATING, Mode.CALIBRATING, Mode.TRACKING]
        assert engine.session.ranges[0] == ColorRange((0, 255, 255), (0, 255, 255))
        assert engine.session.ranges[1] == ColorRange((120, 255, 255), (120, 255, 255))
        assert stats.marker_count == 1
        assert stats.markers_by_pair == {"1-2": 1}
        assert engine.ctx.latest_frame is not None
        assert engine.ctx.latest_mask is not None

    def test_context_tracks_fps(self, tmp_path):
        engine = _engine(MockSource([make_frame() for _ in range(2)]), tmp_path)
        engine.run()
        assert "fps" in engine.ctx.get_system_stats_copy()


class TestCreateEngineFromConfig:
    def test_wires_config(self, tmp_path, valid_config):
        valid_config["calibration"]["threshold_file"] = str(tmp_path / "t.txt")
        valid_config["detection"]["dilate_percent"] = 50
        valid_config["max_frames"] = 2
        config = Config.from_dict(valid_config)
        source = MockSource([make_frame() for _ in range(5)], ObservationConfig(source_id="test"))

        engine = create_engine_from_config(config, source=source)

        assert engine.source is source
        assert engine.config.display is False
        assert engine.config.max_frames == 2
        assert engine.session.matcher.dilate_percent == 50
        assert engine.session.store.path == str(tmp_path / "t.txt")

        stats = engine.run()
        assert stats.frame_count == 2
        assert (tmp_path / "t.txt").exists()
