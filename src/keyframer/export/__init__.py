"""Report export."""

from keyframer.export.renderer import (
    DEFAULT_FILENAME_PREFIX,
    DEFAULT_TITLE,
    HtmlReportRenderer,
    ReportRenderer,
    format_seconds,
)

__all__ = [
    "DEFAULT_FILENAME_PREFIX",
    "DEFAULT_TITLE",
    "HtmlReportRenderer",
    "ReportRenderer",
    "format_seconds",
]
