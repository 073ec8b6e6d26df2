"""
Tests for the calibration box and region sampling.
"""

import numpy as np
import pytest

from calibration import CalibrationSelection, sample_region
from models.color import ColorRange


class TestCalibrationSelection:
    def test_initial_box(self):
        sel = CalibrationSelection()
        assert sel.bounds == (0, 0, 1, 1)
        assert not sel.dragging

    def test_drag_cycle(self):
        sel = CalibrationSelection()
        sel.start(10, 20)
        assert sel.bounds == (10, 20, 10, 20)
        assert sel.is_empty

        sel.extend(40, 50)
        assert sel.bounds == (10, 20, 40, 50)
        assert not sel.is_empty

        sel.finish()
        sel.extend(90, 90)
        assert sel.bounds == (10, 20, 40, 50)

    def test_new_drag_resets_box(self):
        sel = CalibrationSelection()
        sel.start(10, 20)
        sel.extend(40, 50)
        sel.finish()

        sel.start(5, 5)
        assert sel.bounds == (5, 5, 5, 5)

    def test_extend_without_start_is_ignored(self):
        sel = CalibrationSelection()
        sel.extend(30, 30)
        assert sel.bounds == (0, 0, 1, 1)

    def test_reverse_drag_is_empty(self):
        sel = CalibrationSelection()
        sel.start(40, 40)
        sel.extend(10, 10)
        assert sel.is_empty


class TestSampleRegion:
    def test_constant_region(self):
        hsv = np.zeros((100, 100, 3), dtype=np.uint8)
        hsv[10:30, 20:50] = (17, 140, 230)

        result = sample_region(hsv, (20, 10, 50, 30))

        assert result == ColorRange(hsv_min=(17, 140, 230), hsv_max=(17, 140, 230))

    def test_per_axis_extremes(self):
        hsv = np.zeros((10, 10, 3), dtype=np.uint8)
        hsv[2, 2] = (10, 200, 50)
        hsv[2, 3] = (20, 100, 60)
        hsv[3, 2] = (15, 150, 255)
        hsv[3, 3] = (12, 120, 55)

        result = sample_region(hsv, (2, 2, 4, 4))

        assert result.hsv_min == (10, 100, 50)
        assert result.hsv_max == (20, 200, 255)

    def test_end_is_exclusive(self):
        hsv = np.zeros((10, 10, 3), dtype=np.uint8)
        hsv[:, :] = (50, 50, 50)
        hsv[5, :] = (99, 99, 99)
        hsv[:, 5] = (99, 99, 99)

        result = sample_region(hsv, (0, 0, 5, 5))

        assert result.hsv_max == (50, 50, 50)

    def test_empty_region_gives_sentinel(self):
        hsv = np.full((20, 20, 3), 128, dtype=np.uint8)
        result = sample_region(hsv, (5, 5, 5, 5))
        assert result == ColorRange(hsv_min=(255, 255, 255), hsv_max=(0, 0, 0))
        assert result.matches_nothing

    @pytest.mark.parametrize("region", [(10, 5, 5, 15), (5, 10, 15, 5), (10, 10, 3, 3)])
    def test_inverted_region_gives_sentinel(self, region):
        hsv = np.full((20, 20, 3), 128, dtype=np.uint8)
        assert sample_region(hsv, region) == ColorRange.sentinel()

    def test_accepts_selection(self):
        hsv = np.zeros((20, 20, 3), dtype=np.uint8)
        hsv[:, :] = (5, 6, 7)
        sel = CalibrationSelection()
        sel.start(2, 2)
        sel.extend(8, 8)

        assert sample_region(hsv, sel) == ColorRange(hsv_min=(5, 6, 7), hsv_max=(5, 6, 7))

    def test_region_clipped_to_frame(self):
        hsv = np.zeros((20, 20, 3), dtype=np.uint8)
        hsv[:, :] = (1, 2, 3)

        assert sample_region(hsv, (-10, -10, 100, 100)) == ColorRange((1, 2, 3), (1, 2, 3))

    def test_region_outside_frame_gives_sentinel(self):
        hsv = np.zeros((20, 20, 3), dtype=np.uint8)
        assert sample_region(hsv, (30, 30, 40, 40)) == ColorRange.sentinel()
