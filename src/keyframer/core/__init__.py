"""Core types, enums and exceptions for keyframer."""

from .enums import (
    Direction,
    ExtractionState,
    FrameField,
)

from .exceptions import (
    KeyframerError,
    LoadError,
    CaptureError,
    ConfigurationError,
    FrameIndexError,
    ExportError,
)

from .types import (
    DEFAULT_DESCRIPTION,
    RASTER_MEDIA_TYPE,
    # Frames
    Frame,
    # Extraction
    ExtractionRun,
    ExtractionResult,
    # Export
    ExportDocument,
)

__all__ = [
    # Enums
    "Direction",
    "ExtractionState",
    "FrameField",
    # Exceptions
    "KeyframerError",
    "LoadError",
    "CaptureError",
    "ConfigurationError",
    "FrameIndexError",
    "ExportError",
    # Types
    "DEFAULT_DESCRIPTION",
    "RASTER_MEDIA_TYPE",
    "Frame",
    "ExtractionRun",
    "ExtractionResult",
    "ExportDocument",
]
