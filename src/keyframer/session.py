"""Analysis session: one loaded video, its captured frames and their export.

The session wires the engine together and is the single place user actions
enter::

    async with AnalysisSession() as session:
        await session.load("performance.mp4")
        await session.auto_extract()
        session.update_current("description", "Puppet raises its arm")
        session.export().save("reports")
"""

import logging
from datetime import datetime
from typing import Optional, Union

from keyframer.capture.frame_capture import capture_frame
from keyframer.capture.surface import RasterSurface
from keyframer.core.enums import Direction, FrameField
from keyframer.core.exceptions import ExportError, LoadError
from keyframer.core.types import ExportDocument, ExtractionResult, Frame
from keyframer.export.renderer import HtmlReportRenderer, ReportRenderer
from keyframer.extraction.scheduler import AutoExtractionScheduler
from keyframer.sources.base import VideoSource
from keyframer.sources.media import MediaInput
from keyframer.sources.video_file import VideoFileSource
from keyframer.store.frame_store import FrameStore
from keyframer.utils.config import KeyframerConfig

logger = logging.getLogger(__name__)


class AnalysisSession:
    """Owns the video source, scratch surface, Frame Store and scheduler.

    Args:
        config: Session configuration; defaults to :class:`KeyframerConfig`.
        source: Video source to drive. Defaults to a :class:`VideoFileSource`.
        renderer: Report renderer; defaults to an :class:`HtmlReportRenderer`
            built from ``config.export``.
    """

    def __init__(
        self,
        config: Optional[KeyframerConfig] = None,
        source: Optional[VideoSource] = None,
        renderer: Optional[ReportRenderer] = None,
    ):
        self.config = config or KeyframerConfig()
        self.source = source if source is not None else VideoFileSource()
        self.surface = RasterSurface(jpeg_quality=self.config.capture.jpeg_quality)
        self.store = FrameStore()
        self.scheduler = AutoExtractionScheduler(
            self.source,
            self.surface,
            self.store,
            frame_count=self.config.extraction.frame_count,
            description=self.config.capture.placeholder_description,
        )
        if renderer is None:
            export = self.config.export
            renderer = HtmlReportRenderer(
                title=export.title,
                filename_prefix=export.filename_prefix,
                template=export.template,
                template_dir=export.template_dir,
                language=export.language,
            )
        self.renderer = renderer

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def load(self, media: MediaInput) -> None:
        """Load a new video and start over with an empty Frame Store.

        Any in-flight extraction is invalidated and the previous medium is
        released, whether or not the new one loads.

        Raises:
            LoadError: If the new medium's metadata cannot be read.
        """
        self.scheduler.reset()
        self.store.clear()
        try:
            await self.source.load(media)
        except LoadError as e:
            logger.warning(f"Could not load video: {e}")
            raise

    async def close(self) -> None:
        """Invalidate running extractions and release the medium."""
        self.scheduler.reset()
        await self.source.aclose()

    async def __aenter__(self) -> "AnalysisSession":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def is_loaded(self) -> bool:
        return self.source.is_loaded

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    async def seek(self, time: float) -> float:
        """Move the playback position; returns the clamped position."""
        return await self.source.seek(time)

    def capture(self) -> Frame:
        """Capture the displayed frame and append it to the store.

        Returns:
            A copy of the appended frame.

        Raises:
            LoadError: If no video is loaded.
            CaptureError: If rasterizing the frame fails.
        """
        if not self.source.is_loaded:
            raise LoadError("Cannot capture: no video loaded")
        frame = capture_frame(
            self.source, self.surface, self.config.capture.placeholder_description
        )
        index = self.store.append(frame)
        logger.info("Captured frame %d at %.2fs", index + 1, frame.timestamp)
        return self.store[index]

    async def auto_extract(self, count: Optional[int] = None) -> ExtractionResult:
        """Replace the store with ``count`` evenly spaced frames."""
        return await self.scheduler.run(count)

    # ------------------------------------------------------------------
    # Annotation
    # ------------------------------------------------------------------

    def navigate(self, direction: Union[Direction, int]) -> Optional[int]:
        return self.store.navigate(direction)

    def select(self, index: int) -> None:
        self.store.select(index)

    def update_current(self, field: Union[FrameField, str], value: str) -> None:
        self.store.update_current(field, value)

    def update(self, index: int, field: Union[FrameField, str], value: str) -> None:
        self.store.update(index, field, value)

    def remove(self, index: int) -> Frame:
        return self.store.remove(index)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(self, now: Optional[datetime] = None) -> ExportDocument:
        """Render the current frames into a report document.

        Raises:
            ExportError: If the document cannot be assembled. The store is
                left unchanged.
        """
        frames = self.store.snapshot()
        try:
            return self.renderer.export(frames, now=now)
        except ExportError as e:
            logger.error(f"Export failed: {e}")
            raise
