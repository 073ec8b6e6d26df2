"""
Pipeline module for the color-code tracker.

The pipeline orchestrates the per-frame flow:
- Frame acquisition from an observation source
- Input event handling (mode toggle, channel select, calibration drag)
- Calibration sampling or color-code tracking via the TrackingSession
- Rendering and display
"""

from .engine import PipelineEngine, PipelineConfig, PipelineStats, create_engine_from_config

__all__ = [
    "PipelineEngine",
    "PipelineConfig",
    "PipelineStats",
    "create_engine_from_config",
]
