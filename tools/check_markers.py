#!/usr/bin/env python3
"""
Offline check of saved channel thresholds against a still image.
This utility helps verify calibration without a live camera.

Usage:
    python tools/check_markers.py --image snapshot.png --thresholds config/color_thresholds.txt
"""

import argparse
import os
import sys
import time

import cv2

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from detection.blobs import BlobExtractor  # noqa: E402
from display.overlay import draw_result  # noqa: E402
from matching import ColorCodeMatcher  # noqa: E402
from models.frame import FrameData  # noqa: E402
from runtime.session import TrackingSession  # noqa: E402
from storage.threshold_store import ThresholdFileError, load_thresholds  # noqa: E402


def main():
    """Main function for the threshold check."""
    parser = argparse.ArgumentParser(description='Check color-code thresholds on an image')
    parser.add_argument('--image', type=str, required=True,
                        help='Image file to analyse')
    parser.add_argument('--thresholds', type=str, default='config/color_thresholds.txt',
                        help='Channel threshold file (default: config/color_thresholds.txt)')
    parser.add_argument('--dilate', type=int, default=35,
                        help='Blob dilation percent (default: 35)')
    parser.add_argument('--min-area', type=int, default=64,
                        help='Minimum blob area (default: 64)')
    parser.add_argument('--output', type=str, default=None,
                        help='Write the annotated image here')
    args = parser.parse_args()

    frame = cv2.imread(args.image)
    if frame is None:
        print(f"ERROR: Failed to read image {args.image}")
        return 1

    try:
        ranges = load_thresholds(args.thresholds)
    except ThresholdFileError as e:
        print(f"ERROR: {e}")
        return 1

    session = TrackingSession(
        BlobExtractor(min_blob_area=args.min_area),
        ColorCodeMatcher(dilate_percent=args.dilate),
    )
    session.ranges = ranges

    result = session.process_frame(FrameData.from_numpy(frame, timestamp=time.time()))

    print(f"Image: {args.image} ({frame.shape[1]}x{frame.shape[0]})")
    for channel, color_range in enumerate(ranges):
        print(f"  Channel {channel + 1}: {color_range} -> {len(result.blobs[channel])} blobs")
    print(f"Markers found: {len(result.markers)}")
    for pair, marker in result.markers.items():
        cx, cy = marker.center
        print(f"  {pair.label}: {marker.rect.as_xywh()} center=({cx:.1f}, {cy:.1f})")

    if args.output:
        cv2.imwrite(args.output, draw_result(frame.copy(), result))
        print(f"Annotated image saved to {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
