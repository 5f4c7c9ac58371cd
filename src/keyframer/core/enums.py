"""Core enumerations for keyframer."""

from enum import Enum, auto


class ExtractionState(Enum):
    """State of an auto-extraction run."""
    IDLE = auto()
    SEEKING = auto()
    CAPTURING = auto()
    DONE = auto()
    EMPTY = auto()       # duration unknown, nothing sampled
    SUPERSEDED = auto()  # a newer run became active
    FAILED = auto()


class FrameField(str, Enum):
    """Editable annotation fields of a frame."""
    DESCRIPTION = "description"
    NOTES = "notes"


class Direction(Enum):
    """Navigation direction within the Frame Store."""
    PREVIOUS = -1
    NEXT = 1
