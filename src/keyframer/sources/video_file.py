"""Video file source decoded with OpenCV."""

import logging
from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np

from keyframer.core.exceptions import CaptureError, LoadError
from keyframer.sources.base import VideoSource

logger = logging.getLogger(__name__)


class VideoFileSource(VideoSource):
    """Seekable source backed by a video file on disk (mp4, avi, mkv, ...).

    Duration is derived from the container's frame count and frame rate.
    Files that report no frame count load with an unknown (``0.0``)
    duration and stay at position 0.
    """

    def __init__(self):
        super().__init__()
        self._cap: Optional[cv2.VideoCapture] = None
        self._native_fps: float = 0.0
        self._total_frames: int = 0

    # ------------------------------------------------------------------
    # Decoder hooks
    # ------------------------------------------------------------------

    def _open(self, uri: str) -> Tuple[float, int, int]:
        if not Path(uri).exists():
            raise LoadError(f"Video file not found: {uri}")

        cap = cv2.VideoCapture(uri)
        if not cap.isOpened():
            cap.release()
            raise LoadError(f"Could not open video: {uri}")

        self._cap = cap
        self._native_fps = cap.get(cv2.CAP_PROP_FPS) or 0.0
        self._total_frames = max(0, int(cap.get(cv2.CAP_PROP_FRAME_COUNT)))
        width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))

        duration = 0.0
        if self._native_fps > 0 and self._total_frames > 0:
            duration = self._total_frames / self._native_fps

        logger.debug(
            "VideoFileSource metadata: %s  %dx%d @ %.1f fps  %d frames",
            uri, width, height, self._native_fps, self._total_frames,
        )
        return duration, width, height

    def _decode(self, time: float) -> np.ndarray:
        if self._cap is None:
            raise CaptureError("Video is not open")

        index = self.frame_index_at(time)
        self._cap.set(cv2.CAP_PROP_POS_FRAMES, index)
        ret, image = self._cap.read()
        if not ret or image is None:
            raise CaptureError(f"Could not decode frame {index} ({time:.2f}s)")
        return image

    def _close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
        self._native_fps = 0.0
        self._total_frames = 0

    # ------------------------------------------------------------------
    # Extra properties
    # ------------------------------------------------------------------

    def frame_index_at(self, time: float) -> int:
        """Index of the frame displayed at ``time`` seconds."""
        if self._native_fps <= 0 or self._total_frames <= 0:
            return 0
        index = int(round(time * self._native_fps))
        return max(0, min(index, self._total_frames - 1))

    @property
    def fps(self) -> float:
        """Native frame rate, ``0.0`` if unknown."""
        return self._native_fps

    @property
    def total_frames(self) -> int:
        """Total number of frames reported by the container."""
        return self._total_frames
