"""Core data types for keyframer."""

import base64
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional, Tuple

from .enums import ExtractionState


DEFAULT_DESCRIPTION = "Add a motion description..."
RASTER_MEDIA_TYPE = "image/jpeg"


# ============================================================================
# Frames
# ============================================================================

@dataclass
class Frame:
    """A captured still with its annotations.

    Attributes:
        raster: JPEG-encoded image payload.
        timestamp: Position in the source video, in seconds.
        description: What happens in this frame. Starts as a placeholder prompt.
        notes: Free-form remarks, empty by default.
        width: Raster width in pixels.
        height: Raster height in pixels.
    """
    raster: bytes
    timestamp: float
    description: str = DEFAULT_DESCRIPTION
    notes: str = ""
    width: int = 0
    height: int = 0

    @property
    def media_type(self) -> str:
        return RASTER_MEDIA_TYPE

    def data_uri(self) -> str:
        """Return the raster as a ``data:`` URI suitable for an ``<img>`` tag."""
        encoded = base64.b64encode(self.raster).decode("ascii")
        return f"data:{self.media_type};base64,{encoded}"

    def copy(self) -> "Frame":
        return replace(self)


# ============================================================================
# Extraction
# ============================================================================

@dataclass
class ExtractionRun:
    """Ephemeral state of one auto-extraction invocation."""
    run_id: int
    target_count: int
    duration: float
    timestamps: List[float] = field(default_factory=list)
    next_index: int = 0
    collected: List[Frame] = field(default_factory=list)
    state: ExtractionState = ExtractionState.IDLE

    @property
    def interval(self) -> float:
        """Spacing between sampled timestamps."""
        if self.target_count <= 0:
            return 0.0
        return self.duration / self.target_count

    @property
    def is_finished(self) -> bool:
        return self.state in (
            ExtractionState.DONE,
            ExtractionState.EMPTY,
            ExtractionState.SUPERSEDED,
            ExtractionState.FAILED,
        )


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of a finished (or abandoned) extraction run."""
    run_id: int
    state: ExtractionState
    frames: Tuple[Frame, ...] = ()
    timestamps: Tuple[float, ...] = ()
    committed: bool = False

    def __len__(self) -> int:
        return len(self.frames)


# ============================================================================
# Export
# ============================================================================

@dataclass(frozen=True)
class ExportDocument:
    """A rendered report ready to hand to a delivery mechanism."""
    data: bytes
    filename: str
    media_type: str = "text/html; charset=utf-8"

    def save(self, directory: Optional[str | Path] = None) -> Path:
        """Write the document into ``directory`` (cwd by default) and return its path."""
        out_dir = Path(directory) if directory is not None else Path.cwd()
        out_dir.mkdir(parents=True, exist_ok=True)
        path = out_dir / self.filename
        path.write_bytes(self.data)
        return path
