"""Abstract base class for seekable video sources."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional, Tuple

import numpy as np

from keyframer.core.exceptions import LoadError
from keyframer.sources.media import MediaInput, MediaResource, acquire_media

logger = logging.getLogger(__name__)

# Called with the landed position once a seek completes. May be async.
SeekListener = Callable[[float], Any]


class VideoSource(ABC):
    """A loaded medium with a playback position and a displayed frame.

    Subclasses provide the blocking decoder hooks (:meth:`_open`,
    :meth:`_decode`, :meth:`_close`); this class owns the lifecycle, the
    clamping rules and the serialization of seeks.

    Usage::

        async with VideoFileSource() as src:
            await src.load("clip.mp4")
            await src.seek(2.5)
            image = src.current_image
    """

    def __init__(self):
        self._media: Optional[MediaResource] = None
        self._duration: float = 0.0
        self._width: int = 0
        self._height: int = 0
        self._position: float = 0.0
        self._image: Optional[np.ndarray] = None
        self._seek_lock = asyncio.Lock()
        self._seek_listeners: List[SeekListener] = []
        # Set by release() while a load or seek holds the lock.
        self._release_pending = False

    # ------------------------------------------------------------------
    # Decoder hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _open(self, uri: str) -> Tuple[float, int, int]:
        """Open ``uri`` and return ``(duration, width, height)``.

        Raises:
            LoadError: If metadata cannot be read.
        """

    @abstractmethod
    def _decode(self, time: float) -> np.ndarray:
        """Return the BGR frame displayed at ``time`` (already clamped).

        Raises:
            CaptureError: If no frame can be decoded there.
        """

    @abstractmethod
    def _close(self) -> None:
        """Release decoder state. Must be safe when nothing is open."""

    async def _decode_async(self, time: float) -> np.ndarray:
        return await asyncio.to_thread(self._decode, time)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self, media: MediaInput, suffix: Optional[str] = None) -> None:
        """Load a medium, replacing (and releasing) any previous one.

        On return, metadata is known and the frame at position 0 is
        displayed.

        Args:
            media: Path, raw bytes or :class:`MediaResource`.
            suffix: File suffix used when spooling raw bytes, e.g. ``".mp4"``.

        Raises:
            LoadError: If the metadata or the first frame cannot be read.
                The acquired resource is released before raising.
        """
        async with self._seek_lock:
            self._release_locked()
            resource = acquire_media(media, suffix=suffix)
            try:
                duration, width, height = await asyncio.to_thread(
                    self._open, resource.uri
                )
                if width <= 0 or height <= 0:
                    raise LoadError(
                        f"No video dimensions in {resource.uri} ({width}x{height})"
                    )
                image = await self._decode_async(0.0)
            except BaseException as e:
                self._close()
                resource.release()
                if isinstance(e, LoadError) or not isinstance(e, Exception):
                    raise
                raise LoadError(f"Could not read media {resource.uri}: {e}") from e

            if self._release_pending:
                self._release_pending = False
                self._close()
                resource.release()
                raise LoadError(f"Source released while loading {resource.uri}")

            self._media = resource
            self._duration = max(0.0, float(duration))
            self._width = int(width)
            self._height = int(height)
            self._position = 0.0
            self._image = image

        logger.info(
            "%s loaded: %s  %dx%d  %.2fs",
            type(self).__name__, resource.uri, self._width, self._height,
            self._duration,
        )

    def release(self) -> None:
        """Release the current medium. Safe to call when nothing is loaded.

        If a load or seek is in flight, the release happens when its decode
        returns and that call raises :class:`LoadError` instead of landing.
        """
        if self._seek_lock.locked():
            self._release_pending = True
            return
        self._release_locked()

    async def aclose(self) -> None:
        """Release the medium once any in-flight seek has completed."""
        async with self._seek_lock:
            self._release_locked()

    def _release_locked(self) -> None:
        self._release_pending = False
        if self._media is None:
            return
        media = self._media
        self._close()
        media.release()
        self._media = None
        self._duration = 0.0
        self._width = 0
        self._height = 0
        self._position = 0.0
        self._image = None
        logger.info("%s released: %s", type(self).__name__, media.uri)

    async def __aenter__(self) -> "VideoSource":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Seeking
    # ------------------------------------------------------------------

    def clamp(self, time: float) -> float:
        """Clamp ``time`` into ``[0, duration]``."""
        return min(max(0.0, float(time)), self._duration)

    async def seek(self, time: float) -> float:
        """Move the playback position and wait until that frame is displayed.

        Out-of-range times are clamped, not rejected. Seeks on one source are
        serialized: a seek issued while another is in flight starts only
        after the earlier one completes.

        Returns:
            The landed position in seconds.

        Raises:
            LoadError: If no medium is loaded, or it is released before the
                seek completes.
            CaptureError: If the decoder cannot produce a frame there.
        """
        async with self._seek_lock:
            if self._media is None:
                raise LoadError("Cannot seek: no media loaded")

            target = self.clamp(time)
            if target != time:
                logger.debug("Seek to %.3fs clamped to %.3fs", time, target)

            try:
                image = await self._decode_async(target)
            finally:
                if self._release_pending:
                    self._release_locked()
            if self._media is None:
                raise LoadError("Source released during seek")

            self._image = image
            self._position = target
            await self._notify_seeked(target)

        return target

    def add_seek_listener(self, listener: SeekListener) -> None:
        """Register a callable notified with the position after every seek.

        Listeners run while the seek still holds the source, so they see the
        landed frame and must not seek this source themselves.
        """
        self._seek_listeners.append(listener)

    def remove_seek_listener(self, listener: SeekListener) -> None:
        if listener in self._seek_listeners:
            self._seek_listeners.remove(listener)

    async def _notify_seeked(self, position: float) -> None:
        for listener in list(self._seek_listeners):
            try:
                result = listener(position)
                if asyncio.iscoroutine(result):
                    await result
            except Exception as e:
                logger.error(f"Seek listener error: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def uri(self) -> Optional[str]:
        """URI of the loaded medium, or ``None``."""
        return self._media.uri if self._media is not None else None

    @property
    def is_loaded(self) -> bool:
        return self._media is not None

    @property
    def duration(self) -> float:
        """Duration in seconds; ``0.0`` until metadata loads or if unknown."""
        return self._duration

    @property
    def dimensions(self) -> Tuple[int, int]:
        """``(width, height)``; ``(0, 0)`` until metadata loads."""
        return (self._width, self._height)

    @property
    def position(self) -> float:
        """Position of the last completed seek, in seconds."""
        return self._position

    @property
    def current_image(self) -> Optional[np.ndarray]:
        """The displayed BGR frame, or ``None`` when nothing is loaded."""
        return self._image
