"""
Color Code Tracker - Detection Module

This module turns HSV frames into per-channel masks and blob rectangles.
"""

from .blobs import DEFAULT_MIN_BLOB_AREA, BlobExtractor

__all__ = ['BlobExtractor', 'DEFAULT_MIN_BLOB_AREA']
