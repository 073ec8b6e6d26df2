"""
Blob extraction for one color channel.

Thresholds an HSV frame against a channel's color range, cleans the mask with
a single erosion pass and returns the bounding rectangles of its connected
regions.
"""

import logging
from typing import List, Tuple

import cv2
import numpy as np

from models.color import ColorRange
from models.geometry import Rect

DEFAULT_MIN_BLOB_AREA = 64


class BlobExtractor:
    """Extract blob bounding boxes from HSV frames using a channel's color range."""

    def __init__(
        self,
        min_blob_area: int = DEFAULT_MIN_BLOB_AREA,
        erode_kernel: int = 3,
        approx_epsilon: float = 3.0,
    ) -> None:
        """
        Initialize the blob extractor.

        Args:
            min_blob_area: Keep only blobs whose bounding box area is above this
            erode_kernel: Side of the rectangular erosion kernel (0 or 1 disables erosion)
            approx_epsilon: Polygon approximation tolerance in pixels before boxing
        """
        self.min_blob_area = min_blob_area
        self.approx_epsilon = approx_epsilon

        if erode_kernel > 1:
            self.kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (erode_kernel, erode_kernel))
        else:
            self.kernel = None

        logging.info(
            f"Blob extractor initialized (min_blob_area={min_blob_area}, erode_kernel={erode_kernel})"
        )

    def mask(self, hsv: np.ndarray, color_range: ColorRange) -> np.ndarray:
        """
        Binary mask of pixels inside the color range.

        Args:
            hsv: HSV frame (8-bit, 3 channels)
            color_range: Channel thresholds

        Returns:
            Single-channel uint8 mask with 255 for foreground
        """
        if color_range.matches_nothing:
            return np.zeros(hsv.shape[:2], dtype=np.uint8)

        mask = cv2.inRange(hsv, color_range.lower, color_range.upper)
        if self.kernel is not None:
            mask = cv2.erode(mask, self.kernel)
        return mask

    def rects(self, mask: np.ndarray) -> List[Rect]:
        """
        Bounding rectangles of the outer contours in a binary mask.

        Args:
            mask: Binary mask

        Returns:
            Rectangles with area above min_blob_area, in contour order
        """
        # findContours may modify its input on older OpenCV releases
        contours, _ = cv2.findContours(mask.copy(), cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

        blobs = []
        for contour in contours:
            poly = cv2.approxPolyDP(contour, self.approx_epsilon, True)
            x, y, w, h = cv2.boundingRect(poly)
            rect = Rect.from_xywh(x, y, w, h)
            if rect.area > self.min_blob_area:
                blobs.append(rect)
        return blobs

    def extract(self, hsv: np.ndarray, color_range: ColorRange) -> Tuple[np.ndarray, List[Rect]]:
        """Threshold, clean and box one channel. Returns (mask, rects)."""
        mask = self.mask(hsv, color_range)
        return mask, self.rects(mask)
