"""Produce a Frame from whatever a source currently displays."""

import logging

from keyframer.capture.surface import RasterSurface
from keyframer.core.types import DEFAULT_DESCRIPTION, Frame
from keyframer.sources.base import VideoSource

logger = logging.getLogger(__name__)


def capture_frame(
    source: VideoSource,
    surface: RasterSurface,
    description: str = DEFAULT_DESCRIPTION,
) -> Frame:
    """Capture the displayed frame of ``source`` at its current position.

    Args:
        source: A loaded video source.
        surface: Scratch surface used to rasterize and encode the frame.
        description: Initial description, normally the placeholder prompt.

    Returns:
        A new :class:`Frame` with empty notes.

    Raises:
        CaptureError: If the surface cannot draw or encode the frame.
    """
    timestamp = source.position
    raster = surface.capture(source)
    width, height = surface.dimensions
    logger.debug("Captured %dx%d frame at %.2fs (%d bytes)", width, height, timestamp, len(raster))
    return Frame(
        raster=raster,
        timestamp=timestamp,
        description=description,
        notes="",
        width=width,
        height=height,
    )
