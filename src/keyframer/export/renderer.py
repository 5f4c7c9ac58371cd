"""Standalone HTML report of an annotated frame sequence."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol, Sequence

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    PackageLoader,
    StrictUndefined,
    TemplateError,
    select_autoescape,
)

from keyframer.core.exceptions import ExportError
from keyframer.core.types import ExportDocument, Frame

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Shadow Puppet Motion Analysis Report"
DEFAULT_FILENAME_PREFIX = "motion_analysis"
DEFAULT_TEMPLATE = "report.html.j2"


class ReportRenderer(Protocol):
    """Anything that turns an ordered frame sequence into a report document."""

    def render(self, frames: Sequence[Frame], now: Optional[datetime] = None) -> bytes:
        ...

    def export(self, frames: Sequence[Frame], now: Optional[datetime] = None) -> ExportDocument:
        ...


def format_seconds(value: float) -> str:
    """Format a timestamp with exactly two decimals."""
    return f"{value:.2f}"


class HtmlReportRenderer:
    """Render frames into a self-contained HTML page with inline images.

    Each frame becomes a numbered section carrying its timestamp, its
    description, its notes and its raster embedded as a ``data:`` URI.

    Args:
        title: Heading and ``<title>`` of the report.
        filename_prefix: Prefix of the suggested download filename.
        template: Template name looked up in ``template_dir`` first, then in
            the bundled templates.
        template_dir: Optional directory with custom templates.
        language: ``lang`` attribute of the document.
    """

    def __init__(
        self,
        title: str = DEFAULT_TITLE,
        filename_prefix: str = DEFAULT_FILENAME_PREFIX,
        template: str = DEFAULT_TEMPLATE,
        template_dir: Optional[str | Path] = None,
        language: str = "en",
    ):
        self.title = title
        self.filename_prefix = filename_prefix
        self.template = template
        self.language = language

        loaders = [PackageLoader("keyframer.export", "templates")]
        if template_dir is not None:
            loaders.insert(0, FileSystemLoader(str(template_dir)))
        self._env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html", "j2"], default_for_string=True),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self._env.filters["seconds"] = format_seconds

    def render(self, frames: Sequence[Frame], now: Optional[datetime] = None) -> bytes:
        """Render ``frames`` in order to UTF-8 HTML.

        Raises:
            ExportError: If the template cannot be loaded or rendered, or
                the document cannot be encoded.
        """
        now = now or datetime.now()
        try:
            template = self._env.get_template(self.template)
            html = template.render(
                title=self.title,
                language=self.language,
                exported_at=now.strftime("%Y-%m-%d %H:%M:%S"),
                frames=list(frames),
            )
            return html.encode("utf-8")
        except (TemplateError, UnicodeError, TypeError, ValueError) as e:
            raise ExportError(f"Report rendering failed: {e}") from e

    def filename_for(self, now: Optional[datetime] = None) -> str:
        """Suggested filename embedding the export date."""
        now = now or datetime.now()
        return f"{self.filename_prefix}_{now.strftime('%Y-%m-%d')}.html"

    def export(self, frames: Sequence[Frame], now: Optional[datetime] = None) -> ExportDocument:
        """Render ``frames`` into an :class:`ExportDocument` with a dated filename."""
        now = now or datetime.now()
        data = self.render(frames, now=now)
        document = ExportDocument(data=data, filename=self.filename_for(now))
        logger.info(
            "Exported %d frames to %s (%d bytes)",
            len(frames), document.filename, len(data),
        )
        return document
