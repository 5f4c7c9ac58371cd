"""Automatic evenly-spaced frame extraction.

Each run walks a small state machine::

    IDLE -> SEEKING(i) -> CAPTURING(i) -> SEEKING(i+1) ... -> DONE

A seek is only issued after the previous step's capture has finished, so
the source never has two seeks from one run in flight. Every run gets a
monotonically increasing id; after each seek completes the run checks that
it is still the active one and abandons itself otherwise. Collected frames
go to a pending buffer that replaces the Frame Store contents in a single
step once the last capture succeeds.
"""

import asyncio
import logging
from typing import List, Optional

from keyframer.capture.frame_capture import capture_frame
from keyframer.capture.surface import RasterSurface
from keyframer.core.enums import ExtractionState
from keyframer.core.exceptions import ConfigurationError, KeyframerError
from keyframer.core.types import DEFAULT_DESCRIPTION, ExtractionResult, ExtractionRun
from keyframer.sources.base import VideoSource
from keyframer.store.frame_store import FrameStore

logger = logging.getLogger(__name__)

DEFAULT_FRAME_COUNT = 8


def validate_frame_count(count: int) -> int:
    """Return ``count`` if it is a positive int, else raise ConfigurationError."""
    if isinstance(count, bool) or not isinstance(count, int):
        raise ConfigurationError(f"frame count must be an integer, got {count!r}")
    if count <= 0:
        raise ConfigurationError(f"frame count must be positive, got {count}")
    return count


def compute_timestamps(duration: float, count: int) -> List[float]:
    """Sample ``count`` evenly spaced timestamps in ``[0, duration)``.

    ``t_i = i * duration / count`` for ``i = 0 .. count - 1``. An unknown or
    non-positive duration yields no timestamps.

    Raises:
        ConfigurationError: If ``count`` is not a positive integer.
    """
    count = validate_frame_count(count)
    if not duration or duration <= 0:
        return []
    return [i * duration / count for i in range(count)]


class AutoExtractionScheduler:
    """Drives serialized seek -> capture steps and commits the result.

    Args:
        source: Video source to sample.
        surface: Scratch surface used for every capture.
        store: Frame Store that receives the frames of a completed run.
        frame_count: Default number of frames per run.
        description: Initial description for extracted frames.
    """

    def __init__(
        self,
        source: VideoSource,
        surface: RasterSurface,
        store: FrameStore,
        frame_count: int = DEFAULT_FRAME_COUNT,
        description: str = DEFAULT_DESCRIPTION,
    ):
        self._source = source
        self._surface = surface
        self._store = store
        self._frame_count = validate_frame_count(frame_count)
        self._description = description
        self._last_run_id = 0
        self._active: Optional[ExtractionRun] = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def active_run(self) -> Optional[ExtractionRun]:
        """The most recently started run, finished or not."""
        return self._active

    @property
    def active_run_id(self) -> int:
        """Id of the run allowed to commit; ``0`` before any run."""
        return self._last_run_id

    @property
    def state(self) -> ExtractionState:
        """State of the active run, ``IDLE`` when none is in flight."""
        if self._active is None or self._active.is_finished:
            return ExtractionState.IDLE
        return self._active.state

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Invalidate any in-flight run without starting a new one."""
        self._last_run_id += 1
        if self._active is not None and not self._active.is_finished:
            logger.info("Extraction run %d invalidated", self._active.run_id)
        self._active = None

    async def run(self, count: Optional[int] = None) -> ExtractionResult:
        """Extract ``count`` evenly spaced frames and replace the store contents.

        Starting a run supersedes any run still in flight: the older run
        stops at its next seek completion and never touches the store.

        Args:
            count: Frames to extract; defaults to the configured frame count.

        Returns:
            The run's :class:`ExtractionResult`. ``EMPTY`` when the source
            duration is unknown, ``SUPERSEDED`` when a newer run took over.

        Raises:
            ConfigurationError: If ``count`` is not positive.
            KeyframerError: If a seek or capture fails; the store is left
                unchanged.
        """
        target_count = validate_frame_count(
            self._frame_count if count is None else count
        )

        previous = self._active
        self._last_run_id += 1
        duration = self._source.duration
        run = ExtractionRun(
            run_id=self._last_run_id,
            target_count=target_count,
            duration=duration,
            timestamps=compute_timestamps(duration, target_count),
        )
        self._active = run
        if previous is not None and not previous.is_finished:
            logger.info(
                "Extraction run %d supersedes run %d", run.run_id, previous.run_id
            )

        if not run.timestamps:
            run.state = ExtractionState.EMPTY
            logger.info(
                "Extraction run %d: duration unknown, nothing to extract", run.run_id
            )
            return ExtractionResult(run_id=run.run_id, state=run.state)

        logger.info(
            "Extraction run %d started: %d frames every %.2fs over %.2fs",
            run.run_id, target_count, run.interval, duration,
        )

        try:
            for index, timestamp in enumerate(run.timestamps):
                run.next_index = index
                run.state = ExtractionState.SEEKING
                await self._source.seek(timestamp)

                if not self._is_active(run):
                    return self._abandon(run)

                run.state = ExtractionState.CAPTURING
                run.collected.append(
                    capture_frame(self._source, self._surface, self._description)
                )
                logger.debug(
                    "Extraction run %d: captured %d/%d at %.2fs",
                    run.run_id, index + 1, target_count, timestamp,
                )
        except KeyframerError as e:
            if not self._is_active(run):
                return self._abandon(run)
            run.state = ExtractionState.FAILED
            run.collected.clear()
            logger.error(f"Extraction run {run.run_id} failed at step {run.next_index}: {e}")
            raise
        except asyncio.CancelledError:
            run.state = ExtractionState.FAILED
            run.collected.clear()
            raise

        run.next_index = len(run.timestamps)
        frames = tuple(frame.copy() for frame in run.collected)
        self._store.replace_all(run.collected)
        run.collected = []
        run.state = ExtractionState.DONE
        logger.info("Extraction run %d done: %d frames", run.run_id, len(frames))

        return ExtractionResult(
            run_id=run.run_id,
            state=run.state,
            frames=frames,
            timestamps=tuple(run.timestamps),
            committed=True,
        )

    def _is_active(self, run: ExtractionRun) -> bool:
        return run.run_id == self._last_run_id

    def _abandon(self, run: ExtractionRun) -> ExtractionResult:
        run.state = ExtractionState.SUPERSEDED
        run.collected.clear()
        logger.info(
            "Extraction run %d abandoned at step %d: run %d is active",
            run.run_id, run.next_index, self._last_run_id,
        )
        return ExtractionResult(
            run_id=run.run_id,
            state=run.state,
            timestamps=tuple(run.timestamps),
        )
