"""Scoped handles on loaded media.

A :class:`MediaResource` plays the role a browser object URL plays for an
uploaded file: it gives the decoder something it can open and must be
released once the medium is replaced or the session ends.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

MediaInput = Union[str, Path, bytes, bytearray, memoryview, "MediaResource"]


class MediaResource:
    """A filesystem URI for a medium, plus ownership of any backing temp file.

    Args:
        uri: Path the decoder can open.
        owned: When ``True`` the file at ``uri`` is deleted on release.
    """

    def __init__(self, uri: str, owned: bool = False):
        self._uri = uri
        self._owned = owned
        self._released = False

    @property
    def uri(self) -> str:
        return self._uri

    @property
    def owned(self) -> bool:
        return self._owned

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Release the medium. Safe to call more than once."""
        if self._released:
            return
        self._released = True
        if self._owned:
            try:
                os.unlink(self._uri)
            except FileNotFoundError:
                pass
            logger.debug("Deleted spooled medium %s", self._uri)
        logger.debug("Released medium %s", self._uri)

    def __enter__(self) -> "MediaResource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"MediaResource({self._uri!r}, owned={self._owned}, {state})"


def acquire_media(
    media: MediaInput,
    suffix: Optional[str] = None,
) -> MediaResource:
    """Turn a path or raw bytes into a :class:`MediaResource`.

    Paths are borrowed: the caller's file is never deleted. Raw bytes are
    spooled to a temporary file that the returned resource owns.

    Args:
        media: Path to a video file, raw video bytes, or an existing resource
            (returned unchanged).
        suffix: File suffix for spooled bytes, e.g. ``".mp4"``.

    Returns:
        A live :class:`MediaResource`.
    """
    if isinstance(media, MediaResource):
        return media

    if isinstance(media, (bytes, bytearray, memoryview)):
        fd, path = tempfile.mkstemp(prefix="keyframer-", suffix=suffix or ".bin")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(bytes(media))
        except BaseException:
            os.unlink(path)
            raise
        logger.debug("Spooled %d bytes of media to %s", len(media), path)
        return MediaResource(path, owned=True)

    return MediaResource(str(media), owned=False)
