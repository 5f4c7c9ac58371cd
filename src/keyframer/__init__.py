"""keyframer - key frame extraction and annotation for motion analysis.

Load a video, sample representative frames manually or at even intervals,
annotate them, and export the sequence as a self-contained HTML report.
"""

__version__ = "0.1.0"

from keyframer.core import (
    CaptureError,
    ConfigurationError,
    Direction,
    ExportDocument,
    ExportError,
    ExtractionResult,
    ExtractionState,
    Frame,
    FrameField,
    FrameIndexError,
    KeyframerError,
    LoadError,
)
from keyframer.session import AnalysisSession

__all__ = [
    "__version__",
    "AnalysisSession",
    "CaptureError",
    "ConfigurationError",
    "Direction",
    "ExportDocument",
    "ExportError",
    "ExtractionResult",
    "ExtractionState",
    "Frame",
    "FrameField",
    "FrameIndexError",
    "KeyframerError",
    "LoadError",
]
