"""In-memory video source over a sequence of numpy frames."""

import asyncio
import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from keyframer.core.exceptions import CaptureError, LoadError
from keyframer.sources.base import VideoSource

logger = logging.getLogger(__name__)


class FrameArraySource(VideoSource):
    """A video held in memory as BGR uint8 frames.

    Useful for synthetic media and for driving the extraction engine without
    a decoder. ``load()`` takes any label as the medium URI.

    Args:
        frames: BGR uint8 images of identical shape ``(H, W, 3)``.
        fps: Playback rate used to map timestamps to frames.
        duration: Reported duration. Defaults to ``len(frames) / fps``;
            pass ``0.0`` to model a medium whose length is unknown.
        seek_delay: Seconds each seek waits before completing, to model
            decoder latency.
    """

    def __init__(
        self,
        frames: Sequence[np.ndarray],
        fps: float = 30.0,
        duration: Optional[float] = None,
        seek_delay: float = 0.0,
    ):
        super().__init__()
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self._frames = list(frames)
        self._fps = float(fps)
        self._reported_duration = duration
        self._seek_delay = max(0.0, seek_delay)
        self._open_uri: Optional[str] = None
        self.seek_count = 0

    def _open(self, uri: str) -> Tuple[float, int, int]:
        if not self._frames:
            raise LoadError(f"No frames in {uri}")
        height, width = self._frames[0].shape[:2]
        duration = self._reported_duration
        if duration is None:
            duration = len(self._frames) / self._fps
        self._open_uri = uri
        return duration, width, height

    def _decode(self, time: float) -> np.ndarray:
        if self._open_uri is None:
            raise CaptureError("Source is not open")
        index = min(int(round(time * self._fps)), len(self._frames) - 1)
        return self._frames[max(0, index)]

    async def _decode_async(self, time: float) -> np.ndarray:
        if self._open_uri is not None:
            self.seek_count += 1
        if self._seek_delay:
            await asyncio.sleep(self._seek_delay)
        else:
            # Seek completion always suspends at least once.
            await asyncio.sleep(0)
        return self._decode(time)

    def _close(self) -> None:
        self._open_uri = None

    @property
    def fps(self) -> float:
        return self._fps

    @property
    def frame_count(self) -> int:
        return len(self._frames)
