"""Exception hierarchy for keyframer."""


class KeyframerError(Exception):
    """Base exception for all keyframer errors."""

    pass


class LoadError(KeyframerError):
    """Raised when media metadata cannot be read or no media is loaded."""

    pass


class CaptureError(KeyframerError):
    """Raised when drawing or encoding the displayed frame fails."""

    pass


class ConfigurationError(KeyframerError, ValueError):
    """Raised for invalid configuration values, e.g. a non-positive frame count."""

    pass


class FrameIndexError(KeyframerError, IndexError):
    """Raised when a Frame Store operation references an out-of-range index."""

    pass


class ExportError(KeyframerError):
    """Raised when the report document cannot be assembled."""

    pass
