"""Ordered, mutable collection of annotated frames."""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, Union

from keyframer.core.enums import Direction, FrameField
from keyframer.core.exceptions import FrameIndexError
from keyframer.core.types import Frame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreEvent:
    """A change notification from a :class:`FrameStore`.

    ``kind`` is one of ``"append"``, ``"replace"``, ``"update"``,
    ``"select"``, ``"remove"`` or ``"clear"``. ``index`` is the affected
    frame, when there is one.
    """
    kind: str
    index: Optional[int]
    length: int
    current_index: Optional[int]


StoreListener = Callable[[StoreEvent], None]


class FrameStore:
    """Frames in insertion order plus the currently selected index.

    Invariants:
    - ``current_index`` is ``None`` exactly when the store is empty, and is
      otherwise in ``[0, len - 1]``.
    - Frames handed out by :meth:`snapshot`, iteration or :attr:`current`
      are copies; the store's own frames change only through its methods.
    """

    def __init__(self, frames: Optional[Iterable[Frame]] = None):
        self._frames: List[Frame] = []
        self._current: Optional[int] = None
        self._listeners: List[StoreListener] = []
        if frames is not None:
            self._frames = [f.copy() for f in frames]
            self._current = 0 if self._frames else None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def append(self, frame: Frame) -> int:
        """Add ``frame`` at the end and return its index."""
        self._frames.append(frame)
        if self._current is None:
            self._current = 0
        index = len(self._frames) - 1
        self._emit("append", index)
        return index

    def replace_all(self, frames: Iterable[Frame]) -> None:
        """Swap the entire sequence in one step and reset the selection."""
        self._frames = list(frames)
        self._current = 0 if self._frames else None
        self._emit("replace", None)

    def update(self, index: int, field: Union[FrameField, str], value: str) -> None:
        """Set the description or notes of the frame at ``index``.

        Raises:
            FrameIndexError: If ``index`` is out of range.
            ValueError: If ``field`` is not an editable field.
        """
        field = FrameField(field)
        self._check_index(index)
        setattr(self._frames[index], field.value, value)
        self._emit("update", index)

    def update_current(self, field: Union[FrameField, str], value: str) -> None:
        """Update the selected frame. Raises :class:`FrameIndexError` if empty."""
        if self._current is None:
            raise FrameIndexError("No frame selected: the store is empty")
        self.update(self._current, field, value)

    def remove(self, index: int) -> Frame:
        """Delete the frame at ``index`` and return it.

        The selection stays on the same position when possible, otherwise
        moves to the new last frame.
        """
        self._check_index(index)
        frame = self._frames.pop(index)
        if not self._frames:
            self._current = None
        elif self._current is not None and (
            index < self._current or self._current >= len(self._frames)
        ):
            self._current -= 1
        self._emit("remove", index)
        return frame

    def clear(self) -> None:
        self._frames = []
        self._current = None
        self._emit("clear", None)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def navigate(self, direction: Union[Direction, int]) -> Optional[int]:
        """Move the selection one step; boundaries are a no-op.

        Args:
            direction: :class:`Direction` or ``-1`` / ``+1``.

        Returns:
            The (possibly unchanged) current index, ``None`` if empty.
        """
        step = Direction(direction).value
        if self._current is None:
            return None
        target = min(max(0, self._current + step), len(self._frames) - 1)
        if target != self._current:
            self._current = target
            self._emit("select", target)
        return self._current

    def select(self, index: int) -> None:
        """Select the frame at ``index``."""
        self._check_index(index)
        self._current = index
        self._emit("select", index)

    @property
    def current_index(self) -> Optional[int]:
        return self._current

    @property
    def current(self) -> Optional[Frame]:
        """A copy of the selected frame, or ``None`` when empty."""
        if self._current is None:
            return None
        return self._frames[self._current].copy()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def snapshot(self) -> Tuple[Frame, ...]:
        """Copies of all frames, in store order."""
        return tuple(f.copy() for f in self._frames)

    def __getitem__(self, index: int) -> Frame:
        self._check_index(index)
        return self._frames[index].copy()

    def __len__(self) -> int:
        return len(self._frames)

    def __iter__(self) -> Iterator[Frame]:
        return iter(self.snapshot())

    def __bool__(self) -> bool:
        return bool(self._frames)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: StoreListener) -> None:
        """Register a callable invoked with a :class:`StoreEvent` on every change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: StoreListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, kind: str, index: Optional[int]) -> None:
        event = StoreEvent(
            kind=kind,
            index=index,
            length=len(self._frames),
            current_index=self._current,
        )
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Frame store listener error: {e}", exc_info=True)

    def _check_index(self, index: int) -> None:
        # Negative indices are rejected rather than counted from the end.
        if not 0 <= index < len(self._frames):
            raise FrameIndexError(
                f"Frame index {index} out of range for {len(self._frames)} frames"
            )
