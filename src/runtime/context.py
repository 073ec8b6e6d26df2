from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from models.config import Config
from display.input import InputQueue
from runtime.session import TrackingSession


@dataclass
class RuntimeContext:
    """Holds the session and its collaborators for one run; avoids global singletons."""

    config: Config
    session: TrackingSession
    inputs: InputQueue = field(default_factory=InputQueue)

    # Observability
    system_stats: dict = field(default_factory=dict)

    # Last rendered output, for embedding callers
    latest_frame: Optional[np.ndarray] = None
    latest_mask: Optional[np.ndarray] = None

    def update_frame(self, frame: np.ndarray, mask: Optional[np.ndarray], fps: float) -> None:
        self.latest_frame = frame
        self.latest_mask = mask
        self.system_stats["fps"] = fps
        self.system_stats["last_frame_ts"] = time.time()

    def get_system_stats_copy(self) -> dict:
        return dict(self.system_stats)
