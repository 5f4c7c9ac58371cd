"""Automatic evenly spaced frame extraction."""

from keyframer.extraction.scheduler import (
    AutoExtractionScheduler,
    DEFAULT_FRAME_COUNT,
    compute_timestamps,
    validate_frame_count,
)

__all__ = [
    "AutoExtractionScheduler",
    "DEFAULT_FRAME_COUNT",
    "compute_timestamps",
    "validate_frame_count",
]
