"""Document exporter pipeline package.

Converts rendered Markdown to HTML when the destination needs it and writes
the result to stdout, a Markdown file, an HTML file or a PDF file.
"""

from .converter import to_html, to_html_all
from .exporter import (
    Destination,
    OutputFormat,
    RenderedDocument,
    export_document,
    force_extension,
    resolve_destination,
    resolve_format,
)
from .pdf import render_pdf, staged_html_file

__all__ = [
    "Destination",
    "OutputFormat",
    "RenderedDocument",
    "export_document",
    "force_extension",
    "render_pdf",
    "resolve_destination",
    "resolve_format",
    "staged_html_file",
    "to_html",
    "to_html_all",
]
