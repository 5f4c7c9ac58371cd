"""Reusable scratch buffer that rasterizes the displayed video frame."""

import logging
from contextlib import contextmanager
from io import BytesIO
from typing import Iterator, Optional, Tuple

import cv2
import numpy as np
from PIL import Image

from keyframer.core.exceptions import CaptureError
from keyframer.sources.base import VideoSource

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 92


class RasterSurface:
    """A single scratch buffer sized to the source video.

    ``capture()`` resizes the buffer to the source's dimensions, draws the
    displayed frame into it and encodes it as JPEG. The buffer is reused
    across captures; only one capture may hold it at a time.

    Args:
        jpeg_quality: Pillow JPEG quality (1-95).
    """

    def __init__(self, jpeg_quality: int = DEFAULT_JPEG_QUALITY):
        if not 1 <= jpeg_quality <= 95:
            raise ValueError(f"jpeg_quality must be in [1, 95], got {jpeg_quality}")
        self._quality = jpeg_quality
        self._buffer: Optional[np.ndarray] = None
        self._busy = False
        self.reallocations = 0

    @property
    def dimensions(self) -> Tuple[int, int]:
        """``(width, height)`` of the scratch buffer, ``(0, 0)`` before first use."""
        if self._buffer is None:
            return (0, 0)
        return (self._buffer.shape[1], self._buffer.shape[0])

    @property
    def jpeg_quality(self) -> int:
        return self._quality

    def capture(self, source: VideoSource) -> bytes:
        """Rasterize what ``source`` currently displays.

        Returns:
            JPEG bytes of the buffer.

        Raises:
            CaptureError: If the source has no dimensions or displayed frame,
                the surface is already in use, or encoding fails.
        """
        width, height = source.dimensions
        if width <= 0 or height <= 0:
            raise CaptureError(
                f"Cannot capture: source dimensions unknown ({width}x{height})"
            )
        image = source.current_image
        if image is None:
            raise CaptureError("Cannot capture: source displays no frame")

        with self._acquire(width, height) as buffer:
            self._draw(image, buffer)
            return self._encode(buffer)

    @contextmanager
    def _acquire(self, width: int, height: int) -> Iterator[np.ndarray]:
        if self._busy:
            raise CaptureError("Raster surface is already capturing")
        self._busy = True
        try:
            if self._buffer is None or self.dimensions != (width, height):
                self._buffer = np.zeros((height, width, 3), dtype=np.uint8)
                self.reallocations += 1
                logger.debug("Raster surface resized to %dx%d", width, height)
            yield self._buffer
        finally:
            self._busy = False

    @staticmethod
    def _draw(image: np.ndarray, buffer: np.ndarray) -> None:
        if image.dtype != np.uint8:
            raise CaptureError(f"Unsupported frame dtype {image.dtype}")
        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        elif image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)

        height, width = buffer.shape[:2]
        if image.shape[:2] != (height, width):
            cv2.resize(image, (width, height), dst=buffer, interpolation=cv2.INTER_AREA)
        else:
            np.copyto(buffer, image)

    def _encode(self, buffer: np.ndarray) -> bytes:
        try:
            rgb = cv2.cvtColor(buffer, cv2.COLOR_BGR2RGB)
            out = BytesIO()
            Image.fromarray(rgb).save(out, format="JPEG", quality=self._quality)
        except (OSError, ValueError, cv2.error) as e:
            raise CaptureError(f"JPEG encoding failed: {e}") from e
        return out.getvalue()
