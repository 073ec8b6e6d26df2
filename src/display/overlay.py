"""
Frame annotation for the live view and the mask view.
"""

from __future__ import annotations

from typing import Optional, Tuple

import cv2
import numpy as np

from runtime.session import FrameResult, Mode

# Colors (BGR)
CHANNEL_COLORS: Tuple[Tuple[int, int, int], ...] = (
    (0, 213, 255),
    (181, 113, 220),
    (199, 220, 113),
)
COLOR_MARKER = (255, 255, 255)
COLOR_SELECTION = (200, 200, 200)
COLOR_LABEL = (12, 12, 200)


def draw_result(frame: np.ndarray, result: FrameResult) -> np.ndarray:
    """
    Draw blobs, markers, the calibration box and the mode label in place.

    Returns the same frame for chaining.
    """
    if result.mode is Mode.CALIBRATING and result.selection is not None:
        x1, y1, x2, y2 = result.selection
        cv2.rectangle(frame, (x1, y1), (x2, y2), COLOR_SELECTION, 1)

    for channel, blobs in result.blobs.items():
        color = CHANNEL_COLORS[channel % len(CHANNEL_COLORS)]
        for rect in blobs.dilated:
            cv2.rectangle(frame, rect.tl, rect.br, color, 2)

    for pair, marker in result.markers.items():
        cv2.rectangle(frame, marker.rect.tl, marker.rect.br, COLOR_MARKER, 2)
        cv2.putText(
            frame,
            pair.label,
            (marker.rect.x, max(marker.rect.y - 6, 12)),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.5,
            COLOR_MARKER,
            1,
        )

    cv2.putText(frame, result.mode.label, (30, 30), cv2.FONT_HERSHEY_PLAIN, 1.5, COLOR_LABEL, 2)
    cv2.putText(
        frame,
        f"ch {result.channel + 1}",
        (30, 55),
        cv2.FONT_HERSHEY_PLAIN,
        1.2,
        CHANNEL_COLORS[result.channel % len(CHANNEL_COLORS)],
        2,
    )
    return frame


def mask_view(result: FrameResult) -> Optional[np.ndarray]:
    """Union of the channel masks, or None when nothing was thresholded."""
    if not result.masks:
        return None
    combined = None
    for mask in result.masks.values():
        combined = mask.copy() if combined is None else cv2.bitwise_or(combined, mask)
    return combined
