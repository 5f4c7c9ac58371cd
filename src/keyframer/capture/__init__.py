"""Rasterization of the displayed video frame."""

from keyframer.capture.surface import RasterSurface, DEFAULT_JPEG_QUALITY
from keyframer.capture.frame_capture import capture_frame

__all__ = [
    "RasterSurface",
    "DEFAULT_JPEG_QUALITY",
    "capture_frame",
]
