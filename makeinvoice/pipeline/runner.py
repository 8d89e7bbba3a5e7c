"""End-to-end export runner.

Programmatic entry point tying the two pipeline stages together: CSV files
are ingested into a keyed table mapping, rendered through a template, and
the rendered document is routed to its destination. Unlike the CLI, the
runner does not report errors itself; every :class:`makeinvoice.exceptions.AppError`
propagates to the caller unchanged.

Examples
--------
>>> from makeinvoice.pipeline.runner import run_export
>>> run_export(["a.csv", "b.csv"])  # doctest: +SKIP
>>> run_export(["data.csv"], output="invoice.pdf", style="invoice.css")  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from makeinvoice.config import Settings

from .document_exporter import (
    RenderedDocument,
    export_document,
    resolve_format,
    to_html_all,
)
from .markdown_generator import (
    ingest_csv_files,
    is_html_template,
    load_template,
    render_template,
)

logger = logging.getLogger(__name__)


def render_document(
    tables: dict[str, str],
    template_path: Path | str | None,
    settings: Settings,
) -> RenderedDocument:
    """Render the keyed tables through the selected template.

    Tables are converted to HTML before injection only when the template
    itself is an ``.html`` file; otherwise they stay Markdown and the router
    converts the whole document if the destination needs it.
    """
    pre_convert = is_html_template(template_path)
    if pre_convert:
        logger.info("HTML template: converting tables before rendering")
        tables = to_html_all(tables)
    template = load_template(template_path, default_template=settings.default_template)
    return RenderedDocument(render_template(template, tables), is_html=pre_convert)


def run_export(
    inputs: Sequence[Path | str],
    *,
    output: Path | str | None = None,
    template: Path | str | None = None,
    style: Path | str | None = None,
    separator: str | None = None,
    settings: Settings | None = None,
    stream: TextIO | None = None,
) -> Path | None:
    """Run the whole export pipeline.

    Parameters
    ----------
    inputs : Sequence[Path | str]
        CSV files, processed in order.
    output : Path | str | None, optional
        Destination; its extension selects the format. ``None`` prints to
        ``stream``.
    template : Path | str | None, optional
        Template file; ``None`` uses ``settings.default_template``.
    style : Path | str | None, optional
        Stylesheet passed to the PDF converter.
    separator : str | None, optional
        CSV field separator; ``None`` uses ``settings.separator``.
    settings : Settings | None, optional
        Runtime settings; built-in defaults when omitted.
    stream : TextIO | None, optional
        Stream for stdout output.

    Returns
    -------
    Path | None
        The written file, or ``None`` when printing.

    Raises
    ------
    makeinvoice.exceptions.AppError
        Any pipeline failure; nothing is written when ingestion or
        rendering fails.
    """
    settings = settings or Settings()
    logger.info(
        "Exporting %d file(s) to %s (%s)",
        len(inputs),
        output or "stdout",
        resolve_format(output).name,
    )
    tables = ingest_csv_files(inputs, separator or settings.separator)
    document = render_document(tables, template, settings)
    return export_document(
        document, output, settings=settings, style=style, stream=stream
    )


__all__ = ["render_document", "run_export"]
