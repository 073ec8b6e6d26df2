"""
Text-file persistence for per-channel HSV thresholds.

One line per channel, in channel order:

    channel 0, HSVMIN{10,120,80}, HSVMAX{25,255,255}
"""

from __future__ import annotations

import logging
import os
import re
from typing import List, Sequence

from models.color import ColorRange

DEFAULT_THRESHOLD_FILE = "config/color_thresholds.txt"

_LINE_RE = re.compile(
    r"^\s*channel\s+(\d+)\s*,\s*"
    r"HSVMIN\{\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\}\s*,\s*"
    r"HSVMAX\{\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\}\s*$"
)


class ThresholdFileError(Exception):
    """Threshold file could not be read, parsed or written."""


def format_line(channel: int, color_range: ColorRange) -> str:
    h0, s0, v0 = color_range.hsv_min
    h1, s1, v1 = color_range.hsv_max
    return f"channel {channel}, HSVMIN{{{h0},{s0},{v0}}}, HSVMAX{{{h1},{s1},{v1}}}"


def parse_line(line: str) -> tuple[int, ColorRange]:
    """
    Parse one threshold line into (channel, ColorRange).

    Raises:
        ThresholdFileError: If the line does not match the format or a value
            is outside [0, 255].
    """
    match = _LINE_RE.match(line)
    if match is None:
        raise ThresholdFileError(f"Malformed threshold line: {line.strip()!r}")
    values = [int(v) for v in match.groups()]
    try:
        color_range = ColorRange(hsv_min=tuple(values[1:4]), hsv_max=tuple(values[4:7]))
    except ValueError as e:
        raise ThresholdFileError(f"Invalid threshold line {line.strip()!r}: {e}") from e
    return values[0], color_range


def load_thresholds(path: str, n_channels: int = 3) -> List[ColorRange]:
    """
    Read `n_channels` ranges from a threshold file.

    Lines are matched to channels by position; blank lines are skipped and
    lines beyond `n_channels` are ignored.

    Raises:
        ThresholdFileError: Missing/unreadable file, malformed line, channel
            index out of range, or fewer lines than channels.
    """
    try:
        with open(path, "r") as f:
            lines = [line for line in f.read().splitlines() if line.strip()]
    except OSError as e:
        raise ThresholdFileError(f"Cannot read threshold file {path}: {e}") from e

    if len(lines) < n_channels:
        raise ThresholdFileError(
            f"Threshold file {path} has {len(lines)} entries, expected {n_channels}"
        )

    ranges: List[ColorRange] = []
    for line in lines[:n_channels]:
        channel, color_range = parse_line(line)
        if not 0 <= channel < n_channels:
            raise ThresholdFileError(f"Channel index {channel} out of range in {path}")
        ranges.append(color_range)
    return ranges


def save_thresholds(path: str, ranges: Sequence[ColorRange]) -> None:
    """
    Overwrite the threshold file with one line per range.

    Raises:
        ThresholdFileError: If the file cannot be written.
    """
    try:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "w") as f:
            for channel, color_range in enumerate(ranges):
                f.write(format_line(channel, color_range) + "\n")
    except OSError as e:
        raise ThresholdFileError(f"Cannot write threshold file {path}: {e}") from e


class ThresholdStore:
    """
    Session-facing wrapper that never raises.

    Load failures fall back to sentinel ranges that match nothing until the
    channel is calibrated; save failures are logged and reported as False.
    """

    def __init__(self, path: str = DEFAULT_THRESHOLD_FILE, n_channels: int = 3):
        self.path = path
        self.n_channels = n_channels

    def load(self) -> List[ColorRange]:
        try:
            ranges = load_thresholds(self.path, self.n_channels)
        except ThresholdFileError as e:
            logging.warning(f"Threshold load failed, channels start uncalibrated: {e}")
            return [ColorRange.sentinel() for _ in range(self.n_channels)]
        logging.info(f"Loaded {len(ranges)} channel thresholds from {self.path}")
        return ranges

    def save(self, ranges: Sequence[ColorRange]) -> bool:
        try:
            save_thresholds(self.path, ranges)
        except ThresholdFileError as e:
            logging.error(f"Threshold save failed: {e}")
            return False
        logging.info(f"Saved {len(ranges)} channel thresholds to {self.path}")
        return True
