"""
Color Code Tracker - Storage Module

Persists per-channel HSV thresholds between sessions.
"""

from .threshold_store import (
    ThresholdFileError,
    ThresholdStore,
    load_thresholds,
    save_thresholds,
)

__all__ = ['ThresholdFileError', 'ThresholdStore', 'load_thresholds', 'save_thresholds']
