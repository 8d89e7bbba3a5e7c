"""Routing of a rendered document to its destination.

The destination format is inferred once from the output path's extension
and dispatched through a single ``match``:

============  ===============================================================
Format        Action
============  ===============================================================
STDOUT        no output path; print the document verbatim
MARKDOWN      ``.md``, no or unrecognized extension; write the document
HTML          ``.html``; convert to HTML if still Markdown, then write
PDF           ``.pdf``; convert to HTML if still Markdown, then run the
              external converter on a staged ``.html`` file
============  ===============================================================

Markdown to HTML conversion happens here, once, before anything is written;
the write helper only writes.
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TextIO

from makeinvoice.config import (
    HTML_EXTENSION,
    MARKDOWN_EXTENSION,
    OUTPUT_ENCODING,
    PDF_EXTENSION,
    Settings,
)
from makeinvoice.exceptions import DestinationWriteError

from .converter import to_html
from .pdf import render_pdf

logger = logging.getLogger(__name__)


class OutputFormat(Enum):
    """Closed set of destination formats."""

    STDOUT = ""
    MARKDOWN = MARKDOWN_EXTENSION
    HTML = HTML_EXTENSION
    PDF = PDF_EXTENSION

    @property
    def extension(self) -> str:
        """File extension forced onto the output path (empty for stdout)."""
        return self.value

    @property
    def needs_html(self) -> bool:
        """Whether the document must be HTML before it is exported."""
        return self in (OutputFormat.HTML, OutputFormat.PDF)


@dataclass(frozen=True)
class RenderedDocument:
    """Output of template rendering.

    Attributes
    ----------
    content : str
        Rendered text.
    is_html : bool
        True when the table content was converted to HTML before rendering.
    """

    content: str
    is_html: bool = False


@dataclass(frozen=True)
class Destination:
    """Output path paired with the format inferred from it."""

    path: Path | None
    format: OutputFormat


def resolve_format(path: Path | str | None) -> OutputFormat:
    """Infer the destination format from an output path.

    Examples
    --------
    >>> resolve_format(None)
    <OutputFormat.STDOUT: ''>
    >>> resolve_format("invoice.PDF")
    <OutputFormat.PDF: '.pdf'>
    >>> resolve_format("notes.txt")
    <OutputFormat.MARKDOWN: '.md'>
    """
    if not path:
        return OutputFormat.STDOUT
    match Path(path).suffix.lower():
        case ".html":
            return OutputFormat.HTML
        case ".pdf":
            return OutputFormat.PDF
        case _:
            return OutputFormat.MARKDOWN


def resolve_destination(path: Path | str | None) -> Destination:
    """Pair ``path`` with its inferred format."""
    return Destination(Path(path) if path else None, resolve_format(path))


def force_extension(filename: str, extension: str) -> str:
    """Append ``extension`` unless ``filename`` already ends with it.

    An existing different extension is kept, never replaced.

    Examples
    --------
    >>> force_extension("invoice", ".pdf")
    'invoice.pdf'
    >>> force_extension("invoice.pdf", ".pdf")
    'invoice.pdf'
    >>> force_extension("invoice.txt", ".pdf")
    'invoice.txt.pdf'
    """
    if Path(filename).suffix.lower() == extension.lower():
        return filename
    return filename + extension


def write_text_file(content: str, path: Path) -> Path:
    """Create or truncate ``path`` and write ``content`` as UTF-8.

    Raises
    ------
    DestinationWriteError
        If the file cannot be created or written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding=OUTPUT_ENCODING) as fh:
            fh.write(content)
    except OSError as exc:
        raise DestinationWriteError(
            f"cannot write data to `{path}`",
            context={"path": str(path), "reason": str(exc)},
        ) from exc
    logger.info("Wrote %s", path)
    return path


def export_document(
    document: RenderedDocument,
    output: Path | str | None,
    *,
    settings: Settings | None = None,
    style: Path | str | None = None,
    stream: TextIO | None = None,
) -> Path | None:
    """Send ``document`` to the destination described by ``output``.

    Parameters
    ----------
    document : RenderedDocument
        Rendered template output.
    output : Path | str | None
        Destination path; ``None`` or empty prints to ``stream``.
    settings : Settings | None, optional
        Runtime settings (PDF converter name).
    style : Path | str | None, optional
        Stylesheet for PDF output; ignored with a warning otherwise.
    stream : TextIO | None, optional
        Stream used for stdout output. Defaults to ``sys.stdout``.

    Returns
    -------
    Path | None
        The file written, or ``None`` when printing.

    Raises
    ------
    DestinationWriteError
        If the output file or standard output cannot be written.
    ToolUnavailableError, ConverterFailedError, SourceFileError
        From PDF generation.
    """
    settings = settings or Settings()
    destination = resolve_destination(output)
    fmt = destination.format
    if style and fmt is not OutputFormat.PDF:
        logger.warning("Style %s is only applied to PDF output; ignoring it", style)

    content = document.content
    if fmt.needs_html and not document.is_html:
        content = to_html(content)

    match fmt:
        case OutputFormat.STDOUT:
            out = stream if stream is not None else sys.stdout
            try:
                out.write(content)
                out.flush()
            except OSError as exc:
                raise DestinationWriteError(
                    "cannot write to standard output",
                    context={"reason": str(exc)},
                ) from exc
            return None
        case OutputFormat.MARKDOWN | OutputFormat.HTML:
            target = Path(force_extension(str(destination.path), fmt.extension))
            return write_text_file(content, target)
        case OutputFormat.PDF:
            target = Path(force_extension(str(destination.path), fmt.extension))
            return render_pdf(
                content, target, converter=settings.pdf_converter, style=style
            )
